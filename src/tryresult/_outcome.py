"""Captured outcome of a computation.

Exactly one of these is held by a settled Result: the value the computation
returned, or the exception it raised.
"""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """The computation returned normally."""

    value: T


@dataclasses.dataclass(frozen=True, slots=True)
class Failure:
    """The computation raised (or its awaitable failed)."""

    error: Exception


type Outcome[T] = Success[T] | Failure
