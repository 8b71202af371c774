"""Parsing of delimited filter patterns."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

ALL_SENTINEL = "ALL"
FALSY_VALUES = ("0", "no", "n", "false")

_DELIMITERS = re.compile(r"[,|]")


@dataclass(frozen=True)
class Unrestricted:
    """Filter that matches every value."""

    def matches(self, value: str | None) -> bool:
        return True


@dataclass(frozen=True)
class RestrictedTo:
    """Filter that matches only the listed values."""

    values: frozenset[str]
    case_sensitive: bool = True

    def matches(self, value: str | None) -> bool:
        if value is None:
            return False
        if not self.case_sensitive:
            value = value.lower()
        return value in self.values


type MatchFilter = Unrestricted | RestrictedTo


def split_pattern(pattern: str | None) -> frozenset[str]:
    """Split a comma and/or pipe separated pattern into trimmed tokens.

    Empty tokens are dropped, so an absent or blank pattern yields an empty set.
    """
    if not pattern:
        return frozenset()
    return frozenset(
        token.strip() for token in _DELIMITERS.split(pattern) if token.strip()
    )


def parse_filter(pattern: str | None, *, case_sensitive: bool = True) -> MatchFilter:
    """Build a match filter from a pattern string.

    Both the ``ALL`` sentinel (in any case) and an empty pattern mean that
    nothing is filtered out.
    """
    if pattern is None or pattern.strip().upper() == ALL_SENTINEL:
        return Unrestricted()

    tokens = split_pattern(pattern)
    if not tokens:
        return Unrestricted()
    if not case_sensitive:
        tokens = frozenset(token.lower() for token in tokens)
    return RestrictedTo(values=tokens, case_sensitive=case_sensitive)


def parse_boolean(value: str | None, falsy: Iterable[str] = FALSY_VALUES) -> bool:
    """Interpret an action input as a boolean.

    Empty input is false; any value not listed in ``falsy`` is true.
    """
    normalized = (value or "").strip().lower()
    if not normalized:
        return False
    return normalized not in tuple(falsy)


def describe_filter(match_filter: MatchFilter) -> str:
    """Render a filter for log messages."""
    if isinstance(match_filter, Unrestricted):
        return ALL_SENTINEL
    return ", ".join(sorted(match_filter.values))
