"""Tagged requests built from ``expect`` arguments.

``expect`` has two call shapes that share one method name. The arguments are
classified once, here, into an explicit variant; the Result then dispatches
on the variant's type instead of re-inspecting raw arguments.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from tryresult.context import Context
from tryresult.sentinels import Matcher, matcher_for

__all__ = [
    "ExpectRequest",
    "SentinelRegistration",
    "TerminalAssertion",
    "parse_expect",
]


@dataclass(frozen=True, slots=True)
class SentinelRegistration:
    """``expect(sentinel, message_or_handler, *args, **kwargs)``.

    Exactly one of ``message`` / ``handler`` is set.
    """

    matcher: Matcher
    message: str | None = None
    handler: Callable[[Context[Any]], Any] | None = None
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TerminalAssertion:
    """``expect(message, *args, **kwargs)``: finishes the chain."""

    message: str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)


ExpectRequest = SentinelRegistration | TerminalAssertion


def parse_expect(args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> ExpectRequest:
    """Classify raw ``expect`` arguments.

    A leading ``str`` is always a terminal message; strings are never
    sentinels. Anything else must be ``MISSING``, ``None`` or a class.

    Raises:
        TypeError: The arguments fit neither call shape.
    """
    if not args:
        raise TypeError("expect() takes a message or a sentinel as first argument")

    first, *rest = args
    if isinstance(first, str):
        return TerminalAssertion(first, tuple(rest), dict(kwargs))

    matcher = matcher_for(first)
    if matcher is None:
        raise TypeError(
            "expect() sentinel must be MISSING, None or a class, "
            f"got {type(first).__name__}"
        )
    if not rest:
        raise TypeError(
            f"expect({matcher.describe()}, ...) needs a message or a handler"
        )

    target, *extra = rest
    if isinstance(target, str):
        return SentinelRegistration(
            matcher, message=target, args=tuple(extra), kwargs=dict(kwargs)
        )
    if callable(target):
        if extra or kwargs:
            raise TypeError(
                "extra arguments are forwarded to the builder only; "
                "pass a message instead of a handler to use them"
            )
        return SentinelRegistration(matcher, handler=target)
    raise TypeError(
        f"expect({matcher.describe()}, ...) second argument must be a str "
        f"or a callable, got {type(target).__name__}"
    )
