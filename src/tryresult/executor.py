"""The builder-bound entry point that turns a computation into a Result.

An Executor owns one thing: the error builder it was created with. Each call
runs (or adopts) one computation and returns a fresh Result or ResultAsync;
nothing is shared between calls.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, overload

from tryresult._outcome import Failure, Success
from tryresult.config import get_settings
from tryresult.context import frame_location, no_location
from tryresult.result import Result, ResultAsync

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from tryresult.config import Settings
    from tryresult.context import LocationProvider

__all__ = ["Executor", "create_executor"]

log = logging.getLogger(__name__)


class Executor[E: BaseException]:
    """Runs computations and wraps their outcome.

    Accepts a zero-argument callable (sync, or returning an awaitable such as
    an ``async def`` function) or an awaitable that is already in flight.
    Exceptions raised while calling the callable are captured, never
    propagated. ``BaseException`` subclasses that are not ``Exception``
    (``KeyboardInterrupt``, ``SystemExit``, cancellation) still propagate.
    """

    __slots__ = ("_builder", "_locate")

    def __init__(
        self,
        builder: Callable[..., E],
        *,
        locate: LocationProvider | None = None,
    ) -> None:
        if not callable(builder):
            raise TypeError(f"builder must be callable, got {type(builder).__name__}")
        self._builder = builder
        self._locate = locate

    @property
    def locate(self) -> LocationProvider:
        """The caller-location strategy, read from settings when not fixed."""
        if self._locate is not None:
            return self._locate
        return frame_location if get_settings().capture_caller else no_location

    @property
    def builder(self) -> Callable[..., E]:
        """The default error builder."""
        return self._builder

    @overload
    def __call__[T](self, fn: Callable[[], Awaitable[T]], /) -> ResultAsync[T, E]: ...
    @overload
    def __call__[T](self, fn: Awaitable[T], /) -> ResultAsync[T, E]: ...
    @overload
    def __call__[T](self, fn: Callable[[], T], /) -> Result[T, E]: ...
    def __call__(self, fn: Any, /) -> Result[Any, E]:
        """Run ``fn`` (or adopt an awaitable) and capture the outcome."""
        if inspect.isawaitable(fn):
            return ResultAsync.from_awaitable(fn, self._builder, locate=self.locate)
        if not callable(fn):
            raise TypeError(
                f"expected a callable or an awaitable, got {type(fn).__name__}"
            )

        try:
            value = fn()
        except Exception as exc:
            log.debug("computation raised %s", type(exc).__name__)
            return Result(Failure(exc), self._builder, locate=self.locate)

        if inspect.isawaitable(value):
            return ResultAsync.from_awaitable(value, self._builder, locate=self.locate)
        return Result(Success(value), self._builder, locate=self.locate)


def create_executor[E: BaseException](
    builder: Callable[..., E],
    *,
    locate: LocationProvider | None = None,
    settings: Settings | None = None,
) -> Executor[E]:
    """Create an Executor bound to ``builder``.

    Args:
        builder: Called as ``builder(ctx, *args, **kwargs)`` whenever an error
            has to be built from a literal message. Must return an exception.
        locate: Caller-location strategy. Defaults to stack inspection, or to
            the zero location when ``Settings.capture_caller`` is off.
        settings: Settings to consult instead of the environment-resolved ones.
            Without it, settings are read on each call, so building an
            executor never touches the environment.

    Returns:
        An Executor.

    Example:
        Try = create_executor(lambda ctx, code=500: HTTPError(code, ctx.message))
        body = Try(lambda: load(path)).expect("cannot read payload", 400)
    """
    if locate is None and settings is not None:
        locate = frame_location if settings.capture_caller else no_location
    return Executor(builder, locate=locate)
