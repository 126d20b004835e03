"""Result and ResultAsync: the chainable wrapper around a captured outcome.

A Result holds either the value a computation returned or the exception it
raised. ``expect`` registers sentinel handlers (each registration returns a
new Result; the receiver is never modified) and, called with a plain
message, finishes the chain by returning the value or raising a built error.
``or_`` returns the value or a fallback.

ResultAsync is the same state machine over an awaitable. Handlers can be
registered right away, but terminal calls need a settled state: await the
ResultAsync first.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
import logging
from typing import TYPE_CHECKING, Any, Literal, NoReturn, overload

from tryresult._outcome import Failure, Success
from tryresult.context import Context, frame_location
from tryresult.dispatch import SentinelRegistration, TerminalAssertion, parse_expect
from tryresult.errors import ErrorFactoryError, UnsettledResultError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator, Mapping

    from tryresult._outcome import Outcome
    from tryresult.context import LocationProvider
    from tryresult.sentinels import Matcher, MissingType

__all__ = ["HandlerEntry", "Result", "ResultAsync"]

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HandlerEntry[E: BaseException]:
    """A registered sentinel: what to match and how to build the error."""

    matcher: Matcher
    factory: Callable[[Context[Any]], E]


class Result[T, E: BaseException]:
    """Outcome of a computation plus the sentinel handlers registered on it."""

    __slots__ = ("_builder", "_handlers", "_locate", "_outcome")

    def __init__(
        self,
        outcome: Outcome[T] | None,
        builder: Callable[..., E],
        *,
        handlers: tuple[HandlerEntry[E], ...] = (),
        locate: LocationProvider = frame_location,
    ) -> None:
        self._outcome = outcome
        self._builder = builder
        self._handlers = handlers
        self._locate = locate

    @property
    def handlers(self) -> tuple[HandlerEntry[E], ...]:
        """Registered sentinel handlers, in registration order."""
        return self._handlers

    @property
    def is_ok(self) -> bool:
        """True when the computation returned normally."""
        return isinstance(self._state(), Success)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._outcome!r}, "
            f"handlers={len(self._handlers)})"
        )

    # --- expect ---

    @overload
    def expect[U](
        self: Result[U | MissingType, E],
        sentinel: Literal[MissingType.MISSING],
        message: str,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Result[U, E]: ...
    @overload
    def expect[U](
        self: Result[U | MissingType, E],
        sentinel: Literal[MissingType.MISSING],
        handler: Callable[[Context[MissingType]], E],
        /,
    ) -> Result[U, E]: ...
    @overload
    def expect[U](
        self: Result[U | None, E],
        sentinel: None,
        message: str,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Result[U, E]: ...
    @overload
    def expect[U](
        self: Result[U | None, E],
        sentinel: None,
        handler: Callable[[Context[None]], E],
        /,
    ) -> Result[U, E]: ...
    @overload
    def expect(
        self,
        sentinel: type,
        message_or_handler: str | Callable[[Context[Any]], E],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Result[T, E]: ...
    @overload
    def expect(self, message: str, /, *args: Any, **kwargs: Any) -> T: ...
    def expect(self, *args: Any, **kwargs: Any) -> Any:
        """Register a sentinel handler, or finish the chain.

        ``expect(sentinel, message, *args, **kwargs)`` and
        ``expect(sentinel, handler)`` register a handler for ``MISSING``,
        ``None`` or a class and return a new Result. Nothing is built or
        raised at registration time.

        ``expect(message, *args, **kwargs)`` finishes the chain. Handlers are
        checked in registration order against the captured exception, or
        against the value when the computation succeeded; the first match
        raises its error. Otherwise a captured exception is turned into the
        builder's error for ``message`` and raised, and a value is returned.

        Example:
            user = (
                Try(lambda: users.get(user_id))
                .expect(None, "user not found", 404)
                .expect(PermissionError, lambda ctx: Forbidden(ctx))
                .expect("cannot load user")
            )
        """
        match parse_expect(args, kwargs):
            case SentinelRegistration() as registration:
                return self._register(registration)
            case TerminalAssertion() as terminal:
                return self._finalize(terminal)

    def _register(self, registration: SentinelRegistration) -> Result[Any, E]:
        if registration.handler is not None:
            factory = registration.handler
        elif registration.message is not None:
            factory = self._message_factory(
                registration.message, registration.args, registration.kwargs
            )
        else:
            raise TypeError("a sentinel registration needs a message or a handler")
        entry = HandlerEntry(registration.matcher, factory)
        return self._evolve((*self._handlers, entry))

    def _message_factory(
        self, message: str, args: tuple[Any, ...], kwargs: Mapping[str, Any]
    ) -> Callable[[Context[Any]], E]:
        builder = self._builder

        def factory(ctx: Context[Any]) -> E:
            return builder(replace(ctx, message=message), *args, **kwargs)

        return factory

    def _finalize(self, terminal: TerminalAssertion) -> T:
        match self._state():
            case Success(value=value):
                subject: Any = value
                succeeded = True
            case Failure(error=error):
                subject = error
                succeeded = False

        for entry in self._handlers:
            if entry.matcher.matches(subject):
                log.debug(
                    "expect: %s handler matched %s",
                    entry.matcher.describe(),
                    type(subject).__name__,
                )
                ctx = Context(source=subject, caller=self._locate())
                _raise(entry.factory(ctx), subject)

        if succeeded:
            return subject

        log.debug("expect: unmatched %s, using builder", type(subject).__name__)
        ctx = Context(source=subject, caller=self._locate(), message=terminal.message)
        _raise(self._builder(ctx, *terminal.args, **terminal.kwargs), subject)

    # --- or_ ---

    @overload
    def or_[U](self, fallback: Callable[[Context[Exception]], U], /) -> T | U: ...
    @overload
    def or_[U](self, fallback: U, /) -> T | U: ...
    def or_(self, fallback: Any, /) -> Any:
        """Return the value, or ``fallback`` when the computation failed.

        A callable fallback is only called on failure, with a Context whose
        source is the captured exception. Any other fallback is returned as
        is. Registered sentinel handlers play no part here.

        Example:
            Try(lambda: int(raw)).or_(0)
            Try(load_remote).or_(lambda ctx: load_cached())
        """
        match self._state():
            case Success(value=value):
                return value
            case Failure(error=error):
                if callable(fallback):
                    log.debug("or_: computing fallback for %s", type(error).__name__)
                    return fallback(Context(source=error, caller=self._locate()))
                return fallback

    # --- internals ---

    def _state(self) -> Outcome[T]:
        if self._outcome is None:
            raise UnsettledResultError("Result has no outcome")
        return self._outcome

    def _evolve(self, handlers: tuple[HandlerEntry[E], ...]) -> Result[T, E]:
        return Result(self._outcome, self._builder, handlers=handlers, locate=self._locate)


class _Settlement[T]:
    """Shared cell holding an awaitable until it settles, then its outcome.

    The first ``settle`` call awaits the computation; calls that arrive while
    it is in flight await the same future instead of the awaitable itself.
    """

    __slots__ = ("_awaitable", "_inflight", "outcome")

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._awaitable = awaitable
        self._inflight: asyncio.Future[Outcome[T]] | None = None
        self.outcome: Outcome[T] | None = None

    async def settle(self) -> Outcome[T]:
        if self.outcome is not None:
            return self.outcome
        if self._inflight is not None:
            return await self._inflight

        fut: asyncio.Future[Outcome[T]] = asyncio.get_running_loop().create_future()
        self._inflight = fut
        outcome: Outcome[T]
        try:
            value = await self._awaitable
        except asyncio.CancelledError:
            fut.cancel()
            raise
        except Exception as exc:
            log.debug("awaitable failed: %s", type(exc).__name__)
            outcome = Failure(exc)
        else:
            outcome = Success(value)
        self.outcome = outcome
        fut.set_result(outcome)
        return outcome


class ResultAsync[T, E: BaseException](Result[T, E]):
    """A Result over an awaitable that has not necessarily settled yet.

    Registering handlers works at any time and returns a new ResultAsync
    bound to the same awaitable. ``await`` it (or ``await settle()``) to get
    a settled Result; the awaitable runs once no matter how often this is
    done. Terminal ``expect(message)`` and ``or_`` raise
    ``UnsettledResultError`` until then.

    Example:
        user = (await Try(fetch_user(user_id)).expect(None, "no user")).expect("fetch failed")
    """

    __slots__ = ("_settlement",)

    def __init__(
        self,
        settlement: _Settlement[T],
        builder: Callable[..., E],
        *,
        handlers: tuple[HandlerEntry[E], ...] = (),
        locate: LocationProvider = frame_location,
    ) -> None:
        super().__init__(None, builder, handlers=handlers, locate=locate)
        self._settlement = settlement

    @classmethod
    def from_awaitable(
        cls,
        awaitable: Awaitable[T],
        builder: Callable[..., E],
        *,
        locate: LocationProvider = frame_location,
    ) -> ResultAsync[T, E]:
        return cls(_Settlement(awaitable), builder, locate=locate)

    @property
    def settled(self) -> bool:
        """True once the awaitable has completed, successfully or not."""
        return self._settlement.outcome is not None

    async def settle(self) -> Result[T, E]:
        """Await the computation and return a settled Result."""
        outcome = await self._settlement.settle()
        return Result(outcome, self._builder, handlers=self._handlers, locate=self._locate)

    def __await__(self) -> Generator[Any, None, Result[T, E]]:
        return self.settle().__await__()

    def __repr__(self) -> str:
        state = repr(self._settlement.outcome) if self.settled else "<pending>"
        return f"ResultAsync({state}, handlers={len(self._handlers)})"

    def _state(self) -> Outcome[T]:
        outcome = self._settlement.outcome
        if outcome is None:
            raise UnsettledResultError(
                "ResultAsync has not settled",
                hint="Await it, or its settle() method, before expect(message) or or_()",
            )
        return outcome

    def _evolve(self, handlers: tuple[HandlerEntry[E], ...]) -> ResultAsync[T, E]:
        return ResultAsync(
            self._settlement, self._builder, handlers=handlers, locate=self._locate
        )


def _raise(error: object, source: object) -> NoReturn:
    """Raise a built error, chained to the captured exception."""
    if not isinstance(error, BaseException):
        raise ErrorFactoryError(
            f"error factory returned {type(error).__name__}, not an exception",
            produced=error,
            hint="Builders and handlers must return an exception instance",
        )
    if isinstance(source, BaseException) and source is not error:
        raise error from source
    raise error
