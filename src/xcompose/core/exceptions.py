from __future__ import annotations

from typing import Any, Dict, Mapping


class XComposeError(Exception):
    """Base exception for xcompose."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        payload: Dict[str, Any] = {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }
        if self.__cause__ is not None:
            payload["cause"] = str(self.__cause__)
        return payload


class EmptyInputError(XComposeError, ValueError):
    """Raised when migration is called without a composition."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        XComposeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class TriggerEvaluationError(XComposeError):
    """Raised when a fallback trigger cannot decide which composer to use."""


class GetComposedResourceError(XComposeError):
    """Raised when an existing composed resource cannot be fetched."""


class InvalidValidationModeError(XComposeError, ValueError):
    """Raised when a composition carries an unrecognized validation mode."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        XComposeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class NotFoundError(XComposeError, LookupError):
    """Raised by resource readers when the requested object does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        XComposeError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class ConfigError(XComposeError, ValueError):
    """Raised when configuration cannot be loaded or is malformed."""


class InvalidDocumentError(XComposeError, ValueError):
    """Raised when an input YAML document is not a resource object."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        XComposeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ComposeCancelledError(XComposeError):
    """Raised when the reconcile context was cancelled."""


class DeadlineExceededError(ComposeCancelledError):
    """Raised when the reconcile context deadline has passed."""


__all__ = [
    "XComposeError",
    "EmptyInputError",
    "TriggerEvaluationError",
    "GetComposedResourceError",
    "InvalidValidationModeError",
    "NotFoundError",
    "ConfigError",
    "InvalidDocumentError",
    "ComposeCancelledError",
    "DeadlineExceededError",
]
