"""Failure context and caller-location capture.

A ``Context`` is handed to every builder, handler and fallback. The caller
location inside it is best-effort: it comes from a ``LocationProvider`` that
can be swapped per executor, and the default provider falls back to the zero
value when the interpreter does not expose frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
import inspect
from pathlib import Path
from typing import Any, Protocol

__all__ = [
    "NOWHERE",
    "Caller",
    "Context",
    "LocationProvider",
    "frame_location",
    "no_location",
]

_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True, slots=True)
class Caller:
    """Source location of the code that invoked ``expect`` or ``or_``."""

    file: str = ""
    line: int = 0


NOWHERE = Caller()


@dataclass(frozen=True, slots=True)
class Context[S]:
    """Snapshot of the circumstances of a failure.

    Attributes:
        source: The captured exception, or the success value that matched a
            registered sentinel.
        caller: Where the terminal call or fallback was invoked from.
        message: Set only when the failing path was registered with a
            literal message. Handler callbacks always see ``None``.
    """

    source: S
    caller: Caller = NOWHERE
    message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the diagnostic shape; ``message`` is omitted when unset."""
        data: dict[str, Any] = {
            "source": self.source,
            "caller": {"file": self.caller.file, "line": self.caller.line},
        }
        if self.message is not None:
            data["message"] = self.message
        return data


class LocationProvider(Protocol):
    """Strategy returning the consumer's call site."""

    def __call__(self) -> Caller: ...


@cache
def _is_internal(filename: str) -> bool:
    try:
        return Path(filename).resolve().is_relative_to(_PACKAGE_DIR)
    except (OSError, ValueError):
        return False


def frame_location() -> Caller:
    """Return the first stack frame outside this package.

    Frames belonging to tryresult (the engine methods and this helper) are
    skipped, so the result points at the line that called ``expect``/``or_``
    no matter how deep the internal call chain is.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None and _is_internal(frame.f_code.co_filename):
            frame = frame.f_back
        if frame is None:
            return NOWHERE
        return Caller(file=frame.f_code.co_filename, line=frame.f_lineno)
    finally:
        # Break the reference cycle frame objects create.
        del frame


def no_location() -> Caller:
    """Location provider used when caller capture is disabled."""
    return NOWHERE
