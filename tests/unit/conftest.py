# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Fixtures shared by the version resolver unit tests."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Type

import pytest

from nextver.config import VersionPolicy
from nextver.repository import RepositoryQueryError


@dataclass
class FakeRepository:
    """In-memory repository answering the resolver's queries.

    Args:
        branch: Current branch, or None to simulate an unresolvable HEAD.
        tags: Tags merged into the current branch, in repository order.
        tag_hashes: Commit hash of each existing tag.
        history: Commit messages after a commit hash; the None key holds the full history.
        short_hash: Abbreviated HEAD hash.
        fail_log: Whether listing commit messages fails.
    """

    branch: Optional[str] = "main"
    tags: List[str] = field(default_factory=list)
    tag_hashes: Dict[str, str] = field(default_factory=dict)
    history: Dict[Optional[str], List[str]] = field(default_factory=dict)
    short_hash: str = "1a2b3c4"
    fail_log: bool = False
    log_calls: List[tuple] = field(default_factory=list)

    def current_branch_or_tag(self) -> str:
        if self.branch is None:
            raise RepositoryQueryError("Command 'git describe --tags' failed.")
        return self.branch

    def tags_merged_into(self, ref: str) -> List[str]:
        return list(self.tags)

    def commit_messages_between(
        self,
        from_ref: Optional[str],
        to_ref: str = "HEAD",
        path_filter: Optional[str] = None,
    ) -> List[str]:
        self.log_calls.append((from_ref, to_ref, path_filter))
        if self.fail_log:
            raise RepositoryQueryError("Command 'git log' failed.")
        return list(self.history.get(from_ref, []))

    def tag_exists(self, tag: str) -> bool:
        return tag in self.tag_hashes

    def commit_hash_for(self, tag: str) -> str:
        return self.tag_hashes[tag]

    def short_commit_hash(self) -> str:
        return self.short_hash


@pytest.fixture
def policy() -> VersionPolicy:
    """Return a policy with explicit branch names, suffixes and identifiers."""
    return VersionPolicy(
        prefix="v",
        release_branch="main",
        release_candidate_branch="release",
        beta_branch="develop",
        release_candidate_suffix="rc",
        development_suffix="dev",
        default_suffix="alpha",
        major_identifier="major-change",
        minor_identifier="feature:",
    )


@pytest.fixture
def make_repository() -> Type[FakeRepository]:
    """Return the in-memory repository class, called with the state to simulate."""
    return FakeRepository
