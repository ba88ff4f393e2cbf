# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Derive the next semantic version from tags, branch and commit messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from semver import Version

from nextver.config import VersionPolicy
from nextver.constants import BASE_VERSION, MIN_HASH_LENGTH, BranchRole, BumpKind
from nextver.repository import GitRepository, RepositoryQuery, RepositoryQueryError

logger = logging.getLogger(__name__)


class VersionIncrementError(ValueError):
    """Raised when a new version cannot be derived from the previous one."""


@dataclass(frozen=True)
class PreviousRelease:
    """Most recent final release reachable from the current branch.

    Args:
        tag: Tag of the release, or None if nothing has been released yet.
        version: Version of the release, `0.0.0` if nothing has been released yet.
    """

    tag: Optional[str]
    version: Version


@dataclass(frozen=True)
class PreviousVersion:
    """Previous release as reported to callers."""

    previous_tag: Optional[str]
    previous_version_prefixed: str
    previous_version: str


@dataclass(frozen=True)
class NewVersion:
    """Computed version, bare and prefixed."""

    version: str
    version_complete: str


def resolve_previous(
    repository: RepositoryQuery,
    policy: VersionPolicy,
    current_ref: Optional[str] = None,
) -> PreviousRelease:
    """Find the greatest final release among the tags merged into the current branch.

    Tags without the policy prefix, tags that are not valid semantic versions and
    prerelease tags are ignored. The order of tags returned by the repository is
    irrelevant.

    Args:
        repository: Repository to query.
        policy: Versioning policy.
        current_ref: Branch or tag scoping the merged tags. Queried when omitted.

    Returns:
        Previous release, or `0.0.0` without a tag when no tag qualifies.
    """
    if current_ref is None:
        current_ref = repository.current_branch_or_tag()

    previous = PreviousRelease(tag=None, version=Version.parse(BASE_VERSION))
    for tag in repository.tags_merged_into(current_ref):
        remainder = policy.strip_prefix(tag)
        if remainder is None:
            continue
        try:
            version = Version.parse(remainder)
        except ValueError:
            logger.debug("Skipping tag %s, not a semantic version.", tag)
            continue
        if version.prerelease:
            continue
        if version > previous.version:
            previous = PreviousRelease(tag=tag, version=version)

    logger.info(
        "Previous release on %s: %s (tag %s)", current_ref, previous.version, previous.tag
    )
    return previous


def commits_since(
    repository: RepositoryQuery, policy: VersionPolicy, tag: Optional[str]
) -> List[str]:
    """List commit messages after the anchor tag.

    The full history is listed when there is no anchor or it no longer exists.
    Query failures count as an empty history.

    Args:
        repository: Repository to query.
        policy: Versioning policy providing the commit path filter.
        tag: Anchor tag, if any.

    Returns:
        Commit messages.
    """
    try:
        if tag and repository.tag_exists(tag):
            last_commit = repository.commit_hash_for(tag)
            return repository.commit_messages_between(
                last_commit, "HEAD", policy.commit_path_filter
            )
        return repository.commit_messages_between(None, "HEAD")
    except RepositoryQueryError as err:
        logger.warning("Commit history unavailable, assuming no commits: %s", err)
        return []


def classify_bump(
    repository: RepositoryQuery,
    policy: VersionPolicy,
    previous_tag: Optional[str],
    previous_version: Version,
) -> BumpKind:
    """Decide which version component the commits since the anchor require bumping.

    A commit matching the major identifier wins over any minor match.

    Args:
        repository: Repository to query.
        policy: Versioning policy providing the identifiers.
        previous_tag: Anchor tag, if any.
        previous_version: Version of the anchor.

    Returns:
        Bump kind, `BumpKind.PATCH` if no commit matches either identifier.
    """
    messages = [
        message.lower() for message in commits_since(repository, policy, previous_tag)
    ]

    bump = BumpKind.PATCH
    major_rule = policy.major_rule
    for message in messages:
        if major_rule.matches(message):
            bump = BumpKind.MAJOR

    if bump is not BumpKind.MAJOR:
        minor_rule = policy.minor_rule
        for message in messages:
            if minor_rule.matches(message):
                bump = BumpKind.MINOR

    logger.info(
        "%d commit(s) since %s, bumping %s.",
        len(messages),
        previous_tag or previous_version,
        bump.value,
    )
    return bump


def increment(version: Version, bump_kind: BumpKind) -> Version:
    """Apply a semantic version increment.

    Args:
        version: Version to increment.
        bump_kind: Component to increment.

    Raises:
        VersionIncrementError: If the version cannot be incremented.

    Returns:
        Incremented version.
    """
    try:
        if bump_kind is BumpKind.MAJOR:
            return version.bump_major()
        if bump_kind is BumpKind.MINOR:
            return version.bump_minor()
        return version.bump_patch()
    except (TypeError, ValueError) as err:
        raise VersionIncrementError(
            f"Previous version {version} can't increment: {err}"
        ) from err


def format_new_version(
    previous_version: Version,
    bump_kind: BumpKind,
    current_branch: str,
    commits_since_count: int,
    policy: VersionPolicy,
) -> str:
    """Build the new version string according to the branch role.

    The release branch yields the bumped version as is. Every other branch yields
    the bumped triple with a `<suffix>.<commits_since_count>` prerelease label.
    Major bumps always end in a `.0` patch.

    Args:
        previous_version: Version of the previous release.
        bump_kind: Component to increment.
        current_branch: Branch being built.
        commits_since_count: Number of commits since the previous release.
        policy: Versioning policy providing branch names and suffixes.

    Raises:
        VersionIncrementError: If the result is not a valid semantic version.

    Returns:
        New version without prefix.
    """
    new_version = increment(previous_version, bump_kind)

    role = policy.branch_role(current_branch)
    logger.debug("Branch %s has role %s.", current_branch, role.value)
    suffix = policy.suffix_for(role)
    try:
        if suffix is not None:
            parts = (suffix, str(commits_since_count))
            prerelease = ".".join(part for part in parts if part)
            new_version = new_version.finalize_version().replace(prerelease=prerelease)

        if bump_kind is BumpKind.MAJOR:
            new_version = new_version.replace(patch=0)
    except (TypeError, ValueError) as err:
        raise VersionIncrementError(f"Can't format version {new_version}: {err}") from err

    formatted = str(new_version)
    if not Version.is_valid(formatted):
        raise VersionIncrementError(
            f"Computed version {formatted!r} is not a valid semantic version."
        )
    return formatted


class VersionResolver:
    """Compute previous and next versions of a repository.

    Args:
        policy: Versioning policy.
        repository: Repository to query. Defaults to git in the policy's working directory.
    """

    def __init__(
        self, policy: VersionPolicy, repository: Optional[RepositoryQuery] = None
    ) -> None:
        """Bind the resolver to a policy and a repository."""
        self.policy = policy
        self.repository = (
            repository
            if repository is not None
            else GitRepository(policy.working_directory)
        )

    def get_previous_version(self) -> PreviousVersion:
        """Return the previous final release."""
        previous = resolve_previous(self.repository, self.policy)
        return PreviousVersion(
            previous_tag=previous.tag,
            previous_version_prefixed=(
                previous.tag or self.policy.add_prefix(previous.version)
            ),
            previous_version=str(previous.version),
        )

    def get_new_version(self) -> NewVersion:
        """Return the version the current commit should be released as.

        Raises:
            RepositoryQueryError: If the current branch or its tags cannot be queried.
            VersionIncrementError: If no valid new version can be derived.
        """
        current_branch = self.repository.current_branch_or_tag()
        previous = resolve_previous(self.repository, self.policy, current_branch)
        bump_kind = classify_bump(
            self.repository, self.policy, previous.tag, previous.version
        )

        distance = 0
        if self.policy.branch_role(current_branch) is not BranchRole.RELEASE:
            distance = len(commits_since(self.repository, self.policy, previous.tag))

        version = format_new_version(
            previous.version, bump_kind, current_branch, distance, self.policy
        )
        logger.info("New version: %s", version)
        return NewVersion(
            version=version, version_complete=self.policy.add_prefix(version)
        )

    def current_commit_hash(self) -> str:
        """Return the abbreviated HEAD hash, left-padded with zeros to 7 characters."""
        return self.repository.short_commit_hash().rjust(MIN_HASH_LENGTH, "0")
