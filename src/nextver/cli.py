# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Command line entry point printing the next version of a repository."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Final, Optional

import click

from nextver import constants
from nextver.config import VersionPolicy
from nextver.repository import RepositoryQueryError
from nextver.resolver import VersionResolver

logger = logging.getLogger(__name__)

GITHUB_OUTPUT_ENV: Final = "GITHUB_OUTPUT"


def write_outputs(outputs: Dict[str, str], output_file: Path) -> None:
    """Append `key=value` lines for pipeline steps consuming the outputs.

    Args:
        outputs: Output names and values.
        output_file: File collecting step outputs.
    """
    with output_file.open(mode="a", encoding="utf-8") as f:
        for key, value in outputs.items():
            f.write(f"{key}={value}\n")


def resolve_outputs(resolver: VersionResolver) -> Dict[str, str]:
    """Compute every output of a run.

    Args:
        resolver: Resolver bound to the repository.

    Returns:
        Mapping from output name to value.
    """
    previous = resolver.get_previous_version()
    new = resolver.get_new_version()
    return {
        "previous-tag": previous.previous_tag or "",
        "previous-version-prefix": previous.previous_version_prefixed,
        "previous-version": previous.previous_version,
        "version": new.version,
        "version-complete": new.version_complete,
        "commit-hash": resolver.current_commit_hash(),
    }


@click.command(help="Compute the next semantic version from git tags and commits.")
@click.option(
    "--prefix",
    default=constants.DEFAULT_PREFIX,
    envvar="INPUT_PREFIX",
    show_default=True,
    help="Prefix of version tags.",
)
@click.option(
    "--release-branch",
    default=constants.DEFAULT_RELEASE_BRANCH,
    envvar="INPUT_RELEASE_BRANCH",
    show_default=True,
    help="Branch producing final releases.",
)
@click.option(
    "--release-candidate-branch",
    default=constants.DEFAULT_RELEASE_CANDIDATE_BRANCH,
    envvar="INPUT_RELEASE_CANDIDATE_BRANCH",
    show_default=True,
    help="Branch producing release candidates.",
)
@click.option(
    "--beta-branch",
    default=constants.DEFAULT_BETA_BRANCH,
    envvar="INPUT_BETA_BRANCH",
    show_default=True,
    help="Branch producing development prereleases.",
)
@click.option(
    "--release-candidate-suffix",
    default=constants.DEFAULT_RELEASE_CANDIDATE_SUFFIX,
    envvar="INPUT_RELEASE_CANDIDATE_SUFFIX",
    show_default=True,
    help="Prerelease label on the release candidate branch.",
)
@click.option(
    "--development-suffix",
    default=constants.DEFAULT_DEVELOPMENT_SUFFIX,
    envvar="INPUT_DEVELOPMENT_SUFFIX",
    show_default=True,
    help="Prerelease label on the beta branch.",
)
@click.option(
    "--default-suffix",
    default=constants.DEFAULT_SUFFIX,
    envvar="INPUT_DEFAULT_SUFFIX",
    show_default=True,
    help="Prerelease label on every other branch.",
)
@click.option(
    "--major-identifier",
    default=constants.DEFAULT_MAJOR_IDENTIFIER,
    envvar="INPUT_MAJOR_IDENTIFIER",
    show_default=True,
    help="Commit text requiring a major bump.",
)
@click.option(
    "--minor-identifier",
    default=constants.DEFAULT_MINOR_IDENTIFIER,
    envvar="INPUT_MINOR_IDENTIFIER",
    show_default=True,
    help="Commit text requiring a minor bump.",
)
@click.option(
    "--major-id-is-regex",
    is_flag=True,
    envvar="INPUT_MAJOR_ID_IS_REGEX",
    help="Treat the major identifier as a regular expression.",
)
@click.option(
    "--minor-id-is-regex",
    is_flag=True,
    envvar="INPUT_MINOR_ID_IS_REGEX",
    help="Treat the minor identifier as a regular expression.",
)
@click.option(
    "--folder",
    default=".",
    envvar="INPUT_FOLDER",
    type=click.Path(exists=True, file_okay=False),
    show_default=True,
    help="Repository working directory.",
)
@click.option(
    "--log-paths",
    default=None,
    envvar="INPUT_LOG_PATHS",
    help="Only count commits touching this path.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log every repository query.",
)
def main(
    prefix: str,
    release_branch: str,
    release_candidate_branch: str,
    beta_branch: str,
    release_candidate_suffix: str,
    development_suffix: str,
    default_suffix: str,
    major_identifier: str,
    minor_identifier: str,
    major_id_is_regex: bool,
    minor_id_is_regex: bool,
    folder: str,
    log_paths: Optional[str],
    verbose: bool,
) -> None:
    """Click entry point for version resolution."""
    logging.basicConfig(
        stream=sys.stderr, level=logging.DEBUG if verbose else logging.INFO
    )

    try:
        policy = VersionPolicy(
            prefix=prefix,
            release_branch=release_branch,
            release_candidate_branch=release_candidate_branch,
            beta_branch=beta_branch,
            release_candidate_suffix=release_candidate_suffix,
            development_suffix=development_suffix,
            default_suffix=default_suffix,
            major_identifier=major_identifier,
            minor_identifier=minor_identifier,
            major_id_is_regex=major_id_is_regex,
            minor_id_is_regex=minor_id_is_regex,
            working_directory=folder,
            commit_path_filter=log_paths or None,
        )
        outputs = resolve_outputs(VersionResolver(policy))
    except (RepositoryQueryError, ValueError) as err:
        raise click.ClickException(str(err)) from err

    output_file = os.environ.get(GITHUB_OUTPUT_ENV)
    if output_file:
        write_outputs(outputs, Path(output_file))
        logger.debug("Wrote outputs to %s", output_file)

    click.echo(outputs["version-complete"])


if __name__ == "__main__":
    main()
