# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Constants shared by the version resolver and its command line entry point."""

from enum import Enum, unique
from typing import Final

BASE_VERSION: Final = "0.0.0"

# Abbreviated commit hashes are left-padded with zeros up to this length.
MIN_HASH_LENGTH: Final = 7

DEFAULT_PREFIX: Final = "v"
DEFAULT_RELEASE_BRANCH: Final = "main"
DEFAULT_RELEASE_CANDIDATE_BRANCH: Final = "release"
DEFAULT_BETA_BRANCH: Final = "develop"

DEFAULT_RELEASE_CANDIDATE_SUFFIX: Final = "rc"
DEFAULT_DEVELOPMENT_SUFFIX: Final = "beta"
DEFAULT_SUFFIX: Final = "alpha"

DEFAULT_MAJOR_IDENTIFIER: Final = "breaking"
DEFAULT_MINOR_IDENTIFIER: Final = "feat"


@unique
class BumpKind(str, Enum):
    """Version component incremented for a new release."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@unique
class BranchRole(str, Enum):
    """Prerelease treatment of the branch being built."""

    RELEASE = "release"
    RELEASE_CANDIDATE = "release_candidate"
    BETA = "beta"
    DEFAULT = "default"
