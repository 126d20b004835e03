"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: tests import these doubles from here,
and ``conftest.py`` wraps them in fixtures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tryresult import Context


class AppError(Exception):
    """Consumer error type produced by RecordingBuilder."""

    def __init__(self, ctx: Context[Any], *args: Any, **kwargs: Any) -> None:
        super().__init__(ctx.message)
        self.ctx = ctx
        self.extra_args = args
        self.kwargs = kwargs


@dataclass
class RecordingBuilder:
    """Builder test double that records every invocation.

    Use to assert whether (and with what Context) the default builder ran.
    """

    calls: list[tuple[Context[Any], tuple[Any, ...], dict[str, Any]]] = field(
        default_factory=list
    )

    def __call__(self, ctx: Context[Any], *args: Any, **kwargs: Any) -> AppError:
        self.calls.append((ctx, args, kwargs))
        return AppError(ctx, *args, **kwargs)
