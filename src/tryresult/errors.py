"""Exception hierarchy for tryresult.

These are raised by the library itself when it is misused or misconfigured.
Errors manufactured for consumers come from their own builders and handlers
and are never wrapped in these types.
"""

from __future__ import annotations


class TryResultError(Exception):
    """Base exception for all tryresult errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        """Return the message including the hint, when one is attached."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class ConfigurationError(TryResultError):
    """Settings validation or resolution failed."""


class UnsettledResultError(TryResultError):
    """A terminal call reached a ResultAsync before its awaitable settled."""


class ErrorFactoryError(TryResultError, TypeError):
    """A builder or handler returned something that cannot be raised.

    Also a ``TypeError`` so callers catching the interpreter's own
    "exceptions must derive from BaseException" failure keep working.
    """

    def __init__(
        self, message: str, *, produced: object, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.produced = produced
