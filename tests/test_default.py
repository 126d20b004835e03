"""The bundled Try executor and TryError."""

from __future__ import annotations

import json
import os
import subprocess
import sys

import pytest

from tryresult import Caller, Context, Try, TryError, build_try_error
from tryresult.config import get_settings

pytestmark = pytest.mark.unit


def _boom() -> str:
    raise ValueError("boom")


def test_try_returns_value() -> None:
    assert Try(lambda: "foo").expect("cannot get data") == "foo"


def test_try_error_carries_message_code_and_fields() -> None:
    with pytest.raises(TryError) as ei:
        Try(_boom).expect("cannot get data", 503, {"resource": "users"})

    err = ei.value
    assert str(err) == "cannot get data"
    assert err.code == 503
    assert err.fields == {"resource": "users"}
    assert isinstance(err.context.source, ValueError)
    assert err.context.message == "cannot get data"


def test_handler_path_falls_back_to_default_message() -> None:
    with pytest.raises(TryError) as ei:
        Try(lambda: None).expect(None, lambda ctx: build_try_error(ctx, 404)).expect("x")

    assert ei.value.message == "Internal Server Error"
    assert ei.value.code == 404


def test_defaults_come_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("TRYRESULT_DEFAULT_MESSAGE", "Upstream failed")
    monkeypatch.setenv("TRYRESULT_DEFAULT_CODE", "502")
    get_settings.cache_clear()

    err = build_try_error(Context(source=None))

    assert err.message == "Upstream failed"
    assert err.code == 502


def test_to_dict_hides_context() -> None:
    err = TryError("nope", Context(source=ValueError("secret")), 400)
    assert err.to_dict() == {"message": "nope"}


def test_full_json_serializes_context() -> None:
    source = ValueError("secret")
    err = TryError(
        "nope",
        Context(source=source, caller=Caller("svc.py", 9), message="nope"),
        400,
        {"id": 1},
    )

    data = json.loads(err.full_json(indent=2))

    assert data == {
        "message": "nope",
        "context": {
            "source": repr(source),
            "caller": {"file": "svc.py", "line": 9},
            "message": "nope",
        },
        "code": 400,
        "fields": {"id": 1},
    }


def test_package_imports_with_invalid_settings_in_environment() -> None:
    """A bad TRYRESULT_* value surfaces when Try runs, not at import."""
    env = {**os.environ, "TRYRESULT_DEFAULT_CODE": "abc"}
    script = (
        "import tryresult\n"
        "try:\n"
        "    tryresult.Try(lambda: 1)\n"
        "except tryresult.ConfigurationError:\n"
        "    print('configuration error')\n"
    )

    proc = subprocess.run(
        [sys.executable, "-c", script],
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )

    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.strip() == "configuration error"
