# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Test automation using `nox`."""

from typing import Final

import nox
from nox import Session

PYTHON: Final = ["3.8", "3.9", "3.10", "3.11", "3.12"]
CI_ENV: Final = (
    "black",
    "isort",
    "flake8",
    "flake8-annotations",
    "flake8-black",
    "flake8-bugbear",
    "flake8-docstrings",
    "flake8-import-order",
    "mypy",
    "pytest",
    "pytest-cov",
)

nox.options.sessions = ["ci"]


def _setup(session: Session) -> None:
    """Install `nextver` into a virtual environment.

    Args:
        session: `nox` session.
    """
    session.install("-e", ".[test]")


@nox.session(python=PYTHON)
def ci(session: Session) -> None:
    """Run CI against `nextver`.

    Args:
        session: `nox` session.
    """
    _setup(session)
    session.install(*CI_ENV)
    session.run("black", ".")
    session.run("isort", ".")
    session.run("flake8", ".")
    session.run("mypy", "src")
    session.run("pytest", "tests", "--cov", "src/nextver")
