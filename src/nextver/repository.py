# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Read-only queries against the git repository being versioned."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

logger = logging.getLogger(__name__)


class RepositoryQueryError(RuntimeError):
    """Raised when a repository query cannot be answered."""


class RepositoryQuery(Protocol):
    """Queries the version resolver needs from a repository."""

    def current_branch_or_tag(self) -> str:
        """Return the checked out branch name, or the nearest tag when detached."""
        ...

    def tags_merged_into(self, ref: str) -> List[str]:
        """Return the tags reachable from `ref`, in repository order."""
        ...

    def commit_messages_between(
        self,
        from_ref: Optional[str],
        to_ref: str = "HEAD",
        path_filter: Optional[str] = None,
    ) -> List[str]:
        """Return the messages of commits after `from_ref` up to `to_ref`.

        The full history of `to_ref` is listed when `from_ref` is None.
        """
        ...

    def tag_exists(self, tag: str) -> bool:
        """Return whether a tag with exactly this name exists."""
        ...

    def commit_hash_for(self, tag: str) -> str:
        """Return the object hash the tag points at."""
        ...

    def short_commit_hash(self) -> str:
        """Return the abbreviated hash of HEAD."""
        ...


class GitRepository:
    """Answer repository queries by running the `git` executable.

    Args:
        working_directory: Directory inside the repository; every command runs there.
        git_executable: Name or path of the git binary.
    """

    def __init__(
        self, working_directory: Union[str, Path] = ".", git_executable: str = "git"
    ) -> None:
        """Bind the queries to a working directory."""
        self.working_directory = Path(working_directory)
        self.git_executable = git_executable

    def _run(self, args: Sequence[str]) -> str:
        """Run a git command and return its standard output.

        Args:
            args: Arguments following the git executable.

        Raises:
            RepositoryQueryError: If git cannot be launched or exits with a non-zero status.

        Returns:
            Decoded standard output.
        """
        cmd = [self.git_executable, *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.working_directory)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_directory,
                check=True,
                capture_output=True,
                text=True,
            )
        except (subprocess.CalledProcessError, OSError) as err:
            raise RepositoryQueryError(f"Command '{' '.join(cmd)}' failed.") from err
        return result.stdout

    def _lines(self, args: Sequence[str]) -> List[str]:
        """Run a git command and return its non-blank output lines."""
        return [
            line.strip() for line in self._run(args).splitlines() if line.strip()
        ]

    def _first_line(self, args: Sequence[str]) -> str:
        lines = self._lines(args)
        if not lines:
            command = " ".join(args)
            raise RepositoryQueryError(f"Command 'git {command}' returned no output.")
        return lines[0]

    def current_branch_or_tag(self) -> str:
        """Return the checked out branch, falling back to `git describe --tags`.

        Raises:
            RepositoryQueryError: If neither a branch nor a tag can be resolved.

        Returns:
            Branch or tag name.
        """
        try:
            return self._first_line(["symbolic-ref", "--short", "HEAD"])
        except RepositoryQueryError:
            logger.debug("HEAD is detached, describing it by tag.")
        return self._first_line(["describe", "--tags"])

    def tags_merged_into(self, ref: str) -> List[str]:
        """Return the tags whose commits are reachable from `ref`."""
        return self._lines(["tag", "--merged", ref])

    def commit_messages_between(
        self,
        from_ref: Optional[str],
        to_ref: str = "HEAD",
        path_filter: Optional[str] = None,
    ) -> List[str]:
        """Return one full message per commit in `from_ref..to_ref`.

        Args:
            from_ref: Exclusive start of the range, or None for the full history.
            to_ref: Inclusive end of the range.
            path_filter: Only list commits touching this path.

        Returns:
            Commit messages, newest first.
        """
        args = ["log", "-z", "--pretty=format:%B"]
        args.append(f"{from_ref}..{to_ref}" if from_ref else to_ref)
        if path_filter:
            args += ["--", path_filter]
        output = self._run(args)
        if not output.strip():
            return []
        # One NUL separated record per commit, empty messages included.
        return [message.strip() for message in output.split("\0")]

    def tag_exists(self, tag: str) -> bool:
        """Return whether `git tag -l` knows the tag."""
        return len(self._lines(["tag", "-l", tag])) > 0

    def commit_hash_for(self, tag: str) -> str:
        """Return the hash stored in the tag reference."""
        return self._first_line(["show-ref", "-s", f"refs/tags/{tag}"])

    def short_commit_hash(self) -> str:
        """Return the abbreviated hash of HEAD."""
        return self._first_line(["rev-parse", "--verify", "--short", "HEAD"])
