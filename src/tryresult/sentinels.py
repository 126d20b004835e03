"""Sentinels and the matchers registered through ``expect``.

``MISSING`` stands for "no value was produced" (use it as a ``dict.get`` or
``getattr`` default), ``None`` for an explicit null, and any class for
"an instance of this type means failure".
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Final

__all__ = [
    "MISSING",
    "InstanceMatcher",
    "Matcher",
    "MissingMatcher",
    "MissingType",
    "NoneMatcher",
    "matcher_for",
]


class MissingType(enum.Enum):
    """Type of the ``MISSING`` marker (an enum so type checkers can narrow it)."""

    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = MissingType.MISSING


@dataclass(frozen=True, slots=True)
class MissingMatcher:
    """Matches the ``MISSING`` marker."""

    def matches(self, subject: object) -> bool:
        return subject is MISSING

    def describe(self) -> str:
        return "MISSING"


@dataclass(frozen=True, slots=True)
class NoneMatcher:
    """Matches ``None``."""

    def matches(self, subject: object) -> bool:
        return subject is None

    def describe(self) -> str:
        return "None"


@dataclass(frozen=True, slots=True)
class InstanceMatcher:
    """Matches instances of ``cls``, subclasses included."""

    cls: type

    def matches(self, subject: object) -> bool:
        return isinstance(subject, self.cls)

    def describe(self) -> str:
        return self.cls.__qualname__


Matcher = MissingMatcher | NoneMatcher | InstanceMatcher


def matcher_for(sentinel: object) -> Matcher | None:
    """Return the matcher for a sentinel, or None if it is not one."""
    if sentinel is MISSING:
        return MissingMatcher()
    if sentinel is None:
        return NoneMatcher()
    if isinstance(sentinel, type):
        return InstanceMatcher(sentinel)
    return None
