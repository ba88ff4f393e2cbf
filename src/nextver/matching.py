# <Copyright 2022, Argo AI, LLC. Released under the MIT license.>

"""Rules deciding whether a commit message triggers a version bump."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Union


@dataclass(frozen=True)
class SubstringRule:
    """Match commit messages containing a fixed piece of text.

    Args:
        text: Text to look for. Compared case-insensitively.
    """

    text: str

    def matches(self, message: str) -> bool:
        """Return whether the message contains the rule text."""
        return self.text.lower() in message.lower()


@dataclass(frozen=True)
class PatternRule:
    """Match commit messages against a regular expression.

    Args:
        pattern: Compiled expression, searched anywhere in the message.
    """

    pattern: Pattern[str]

    @classmethod
    def compile(cls, expression: str) -> PatternRule:
        """Build a case-insensitive rule from a regular expression.

        Args:
            expression: Regular expression source.

        Raises:
            ValueError: If the expression is not a valid regular expression.

        Returns:
            Rule searching for the expression.
        """
        try:
            return cls(re.compile(expression, re.IGNORECASE))
        except re.error as err:
            raise ValueError(
                f"Invalid identifier pattern {expression!r}: {err}"
            ) from err

    def matches(self, message: str) -> bool:
        """Return whether the pattern is found in the lower-cased message."""
        return self.pattern.search(message.lower()) is not None


MatchRule = Union[SubstringRule, PatternRule]


def build_rule(identifier: str, is_regex: bool) -> MatchRule:
    """Create the rule for a bump identifier.

    Args:
        identifier: Text or regular expression identifying bump-triggering commits.
        is_regex: Whether `identifier` is a regular expression.

    Returns:
        Pattern rule if `is_regex` is set, substring rule otherwise.
    """
    if is_regex:
        return PatternRule.compile(identifier)
    return SubstringRule(identifier)
