from __future__ import annotations

from xcompose.core.exceptions import (
    ComposeCancelledError,
    DeadlineExceededError,
    EmptyInputError,
    GetComposedResourceError,
    InvalidValidationModeError,
    NotFoundError,
    XComposeError,
)


def test_context_is_copied() -> None:
    ctx = {"key": "value"}
    err = XComposeError("failed", context=ctx)
    ctx["key"] = "changed"
    assert err.context == {"key": "value"}


def test_to_json_error_includes_cause() -> None:
    try:
        try:
            raise ConnectionError("refused")
        except ConnectionError as exc:
            raise GetComposedResourceError("cannot get composed resource", context={"name": "x"}) from exc
    except GetComposedResourceError as err:
        payload = err.to_json_error()

    assert payload == {
        "message": "cannot get composed resource",
        "code": "GetComposedResourceError",
        "context": {"name": "x"},
        "cause": "refused",
    }


def test_builtin_exception_kinds() -> None:
    assert isinstance(EmptyInputError("x"), ValueError)
    assert isinstance(InvalidValidationModeError("x"), ValueError)
    assert isinstance(NotFoundError("x"), LookupError)
    assert isinstance(DeadlineExceededError("x"), ComposeCancelledError)
    assert str(NotFoundError("gone")) == "gone"
