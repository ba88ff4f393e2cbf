# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Versioning policy supplied by the caller."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from nextver.constants import (
    DEFAULT_BETA_BRANCH,
    DEFAULT_DEVELOPMENT_SUFFIX,
    DEFAULT_MAJOR_IDENTIFIER,
    DEFAULT_MINOR_IDENTIFIER,
    DEFAULT_PREFIX,
    DEFAULT_RELEASE_BRANCH,
    DEFAULT_RELEASE_CANDIDATE_BRANCH,
    DEFAULT_RELEASE_CANDIDATE_SUFFIX,
    DEFAULT_SUFFIX,
    BranchRole,
)
from nextver.matching import MatchRule, build_rule


@dataclass(frozen=True)
class VersionPolicy:
    """Instantiates a VersionPolicy object describing how versions are derived.

    Args:
        prefix: Text prepended to every tag and complete version, e.g. "v".
        release_branch: Branch producing final releases.
        release_candidate_branch: Branch producing release candidates.
        beta_branch: Branch producing development prereleases.
        release_candidate_suffix: Prerelease label used on the release candidate branch.
        development_suffix: Prerelease label used on the beta branch.
        default_suffix: Prerelease label used on every other branch.
        major_identifier: Text or pattern marking commits that require a major bump.
        minor_identifier: Text or pattern marking commits that require a minor bump.
        major_id_is_regex: Whether `major_identifier` is a regular expression.
        minor_id_is_regex: Whether `minor_identifier` is a regular expression.
        working_directory: Directory of the repository to inspect.
        commit_path_filter: Optional path restricting which commits are listed.
    """

    prefix: str = DEFAULT_PREFIX
    release_branch: str = DEFAULT_RELEASE_BRANCH
    release_candidate_branch: str = DEFAULT_RELEASE_CANDIDATE_BRANCH
    beta_branch: str = DEFAULT_BETA_BRANCH
    release_candidate_suffix: str = DEFAULT_RELEASE_CANDIDATE_SUFFIX
    development_suffix: str = DEFAULT_DEVELOPMENT_SUFFIX
    default_suffix: str = DEFAULT_SUFFIX
    major_identifier: str = DEFAULT_MAJOR_IDENTIFIER
    minor_identifier: str = DEFAULT_MINOR_IDENTIFIER
    major_id_is_regex: bool = False
    minor_id_is_regex: bool = False
    working_directory: Union[str, Path] = "."
    commit_path_filter: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject identifier patterns that do not compile.

        Raises:
            ValueError: If a regex identifier is not a valid regular expression.
        """
        build_rule(self.major_identifier, self.major_id_is_regex)
        build_rule(self.minor_identifier, self.minor_id_is_regex)

    @property
    def major_rule(self) -> MatchRule:
        """Return the rule detecting commits that require a major bump."""
        return build_rule(self.major_identifier, self.major_id_is_regex)

    @property
    def minor_rule(self) -> MatchRule:
        """Return the rule detecting commits that require a minor bump."""
        return build_rule(self.minor_identifier, self.minor_id_is_regex)

    def branch_role(self, branch: str) -> BranchRole:
        """Classify a branch name by exact comparison with the configured branches.

        Args:
            branch: Current branch (or tag) name.

        Returns:
            Role of the branch. Unknown branches get `BranchRole.DEFAULT`.
        """
        if branch == self.release_branch:
            return BranchRole.RELEASE
        if branch == self.release_candidate_branch:
            return BranchRole.RELEASE_CANDIDATE
        if branch == self.beta_branch:
            return BranchRole.BETA
        return BranchRole.DEFAULT

    def suffix_for(self, role: BranchRole) -> Optional[str]:
        """Return the prerelease label for a branch role, or None for final releases."""
        suffixes = {
            BranchRole.RELEASE_CANDIDATE: self.release_candidate_suffix,
            BranchRole.BETA: self.development_suffix,
            BranchRole.DEFAULT: self.default_suffix,
        }
        return suffixes.get(role)

    def add_prefix(self, version: object) -> str:
        """Return the version qualified with the tag prefix."""
        return f"{self.prefix}{version}"

    def strip_prefix(self, tag: str) -> Optional[str]:
        """Remove the tag prefix.

        Args:
            tag: Tag name.

        Returns:
            Remainder of the tag, or None if the tag does not carry the prefix.
        """
        if not tag.startswith(self.prefix):
            return None
        return tag[len(self.prefix) :]
