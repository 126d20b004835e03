"""Ready-made error type and executor.

``Try`` builds ``TryError`` instances: a message, the failure Context, an
HTTP-style status code and optional structured fields. Applications with
their own error type should call ``create_executor`` with their own builder.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from tryresult.config import get_settings
from tryresult.executor import create_executor

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tryresult.context import Context

__all__ = ["Try", "TryError", "build_try_error"]


class TryError(Exception):
    """Error carrying its failure Context, a status code and extra fields."""

    def __init__(
        self,
        message: str,
        context: Context[Any],
        code: int = 500,
        fields: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context
        self.code = code
        self.fields = dict(fields) if fields is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Client-safe form: only the message."""
        return {"message": self.message}

    def full_json(self, indent: int | str | None = None) -> str:
        """Serialize everything, context included, for logs and diagnostics.

        Values JSON cannot represent (the captured exception, for one) are
        written as their ``repr``.
        """
        return json.dumps(
            {
                "message": self.message,
                "context": self.context.as_dict(),
                "code": self.code,
                "fields": self.fields,
            },
            indent=indent,
            default=repr,
        )


def build_try_error(
    ctx: Context[Any],
    code: int | None = None,
    fields: Mapping[str, Any] | None = None,
) -> TryError:
    """Default builder: fills message and code from settings when absent."""
    settings = get_settings()
    return TryError(
        ctx.message if ctx.message is not None else settings.default_message,
        ctx,
        code if code is not None else settings.default_code,
        fields,
    )


Try = create_executor(build_try_error)
