"""Settings for tryresult: schema, environment loading and resolution.

Precedence, lowest to highest: defaults < ``.env`` < ``TRYRESULT_*``
environment variables < programmatic overrides. Resolution happens once per
process through ``get_settings()``; call ``resolve_settings()`` directly for a
fresh, uncached result.
"""

from __future__ import annotations

from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tryresult.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["ENV_PREFIX", "Settings", "get_settings", "load_env", "resolve_settings"]

log = logging.getLogger(__name__)

ENV_PREFIX = "TRYRESULT_"

_DOTENV_LOADED = False


class Settings(BaseModel):
    """Validated, immutable library settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    #: Inspect the stack for the caller's file and line. Off yields ``("", 0)``.
    capture_caller: bool = True
    #: Message used by the default ``TryError`` builder when none was given.
    default_message: str = Field(default="Internal Server Error", min_length=1)
    #: Status code used by the default ``TryError`` builder.
    default_code: int = Field(default=500, ge=100, le=599)


def _coerce_bool(v: str) -> bool:
    """Convert string to boolean using common conventions."""
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _coerce_env_value(value: str, target_type: type | None) -> Any:
    if target_type is bool:
        return _coerce_bool(value)
    if target_type is int:
        try:
            return int(value.strip())
        except ValueError:
            # Let the schema report it with the field name attached.
            return value
    return value


def load_env() -> dict[str, Any]:
    """Read ``TRYRESULT_*`` variables into settings fields.

    Values are coerced using the field annotations on ``Settings``. Variables
    that do not name a field are skipped.
    """
    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        info = Settings.model_fields.get(field_name)
        if info is None:
            log.debug("ignoring unknown setting %s", key)
            continue
        config[field_name] = _coerce_env_value(value, info.annotation)
    return config


def _try_load_dotenv() -> None:
    """Load a ``.env`` file once; failures leave the environment untouched."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    try:
        from dotenv import load_dotenv

        load_dotenv()
    except Exception:
        log.debug("dotenv loading failed", exc_info=True)


def resolve_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Resolve settings from the environment and ``overrides``.

    Raises:
        ConfigurationError: A value failed validation.
    """
    _try_load_dotenv()
    merged = {**load_env(), **(overrides or {})}
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(part) for part in err.get("loc", ()))
        msg = err.get("msg")
        raise ConfigurationError(
            f"Invalid setting {loc!r}: {msg}",
            hint=f"Check {ENV_PREFIX}{loc.upper()} or the overrides passed in",
        ) from e
    log.debug("resolved settings: %s", settings)
    return settings


@cache
def get_settings() -> Settings:
    """Return the process-wide settings, resolved on first use."""
    return resolve_settings()
