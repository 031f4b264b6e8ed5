"""Custom exception hierarchy for attrschema.

All public errors inherit from AttrSchemaError so callers can catch the base
class for any attrschema-specific failure.

Validation problems are *not* exceptions: ``Attribute.validate`` returns them
as a list of strings.  Exceptions are reserved for schema-authoring mistakes
(:class:`ConfigurationError`) and for input that cannot be coerced at all
(:class:`IncompatibleTypeError`).
"""
from __future__ import annotations

from typing import Any


class AttrSchemaError(Exception):
    """Base exception for all attrschema errors."""


class ConfigurationError(AttrSchemaError):
    """Raised when a type, attribute, or record is misconfigured.

    Detected at definition time when the :class:`~attrschema.Attribute` or
    :class:`~attrschema.types.record.Record` is built, so the schema author
    gets a clear message instead of a confusing failure during validation.

    Args:
        message: Human-readable description.
        option: Name of the offending option, if any.
        value: The offending option value, if any.
    """

    def __init__(
        self,
        message: str,
        option: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.option = option
        self.value = value


class IncompatibleTypeError(AttrSchemaError):
    """Raised when ``load`` cannot coerce a value into the declared type.

    Args:
        value: The value that failed to load.
        type_name: Name of the type that was expected.
        context: Dotted context path of the node being loaded.
        reason: Optional extra detail (e.g. the JSON decoder message).
    """

    def __init__(
        self,
        value: Any,
        type_name: str,
        context: str,
        reason: str | None = None,
    ) -> None:
        message = (
            f"Type {type_name} cannot load value {value!r} "
            f"(got: {type(value).__name__}) while loading {context}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.value = value
        self.type_name = type_name
        self.context = context
        self.reason = reason or ""

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response for API callers."""
        return {
            "error": "INCOMPATIBLE_TYPE",
            "message": str(self),
            "details": {
                "context": self.context,
                "expected": self.type_name,
                "received": type(self.value).__name__,
            },
        }
