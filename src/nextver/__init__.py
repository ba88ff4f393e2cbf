# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Compute the next semantic version of a repository from its git history."""

from nextver.config import VersionPolicy
from nextver.constants import BranchRole, BumpKind
from nextver.repository import GitRepository, RepositoryQuery, RepositoryQueryError
from nextver.resolver import VersionIncrementError, VersionResolver

__all__ = [
    "BranchRole",
    "BumpKind",
    "GitRepository",
    "RepositoryQuery",
    "RepositoryQueryError",
    "VersionIncrementError",
    "VersionPolicy",
    "VersionResolver",
]
