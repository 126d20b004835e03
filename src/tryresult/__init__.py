"""tryresult: run a computation, then unwrap it explicitly.

Public API:
    - create_executor(): bind an error builder, get an Executor
    - Executor: turns a callable or awaitable into a Result / ResultAsync
    - Result.expect(): register sentinel handlers, then unwrap or raise
    - Result.or_(): unwrap or fall back
    - Try / TryError: ready-made executor and error type
"""

from __future__ import annotations

import logging

from tryresult.config import Settings, get_settings, resolve_settings
from tryresult.context import (
    NOWHERE,
    Caller,
    Context,
    LocationProvider,
    frame_location,
    no_location,
)
from tryresult.default import Try, TryError, build_try_error
from tryresult.errors import (
    ConfigurationError,
    ErrorFactoryError,
    TryResultError,
    UnsettledResultError,
)
from tryresult.executor import Executor, create_executor
from tryresult.result import HandlerEntry, Result, ResultAsync
from tryresult.sentinels import MISSING, MissingType

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("tryresult")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("tryresult").addHandler(logging.NullHandler())

__all__ = [
    "MISSING",
    "NOWHERE",
    "Caller",
    "ConfigurationError",
    "Context",
    "ErrorFactoryError",
    "Executor",
    "HandlerEntry",
    "LocationProvider",
    "MissingType",
    "Result",
    "ResultAsync",
    "Settings",
    "Try",
    "TryError",
    "TryResultError",
    "UnsettledResultError",
    "build_try_error",
    "create_executor",
    "frame_location",
    "get_settings",
    "no_location",
    "resolve_settings",
]
