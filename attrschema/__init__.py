"""attrschema – runtime schemas for loading, validating and describing data.

Declare the shape once, then load, validate, dump, describe and synthesize
examples for data of that shape.

Public API
----------
``Attribute``
    A type plus options (``required``, ``required_if``, ``default``,
    ``values``, ``description``, ``example`` and type-specific options).

``Record.builder``
    Declare a structured record field by field.

``parse``
    Load and validate a raw value against an attribute in one call.

Re-exported types
-----------------
``Integer``, ``Float``, ``String``, ``Boolean``, ``DateTime``, ``Object``,
``Collection``, ``Record``, ``RecordValue``, ``DependencyResolver`` and all
error classes.

Extensibility
-------------
New type variants can be registered via::

    from attrschema.types.registry import TypeRegistry

    @TypeRegistry.register("uuid", uuid.UUID)
    class UUIDType(TypeVariant):
        ...

After registration, ``Attribute("uuid")`` and ``Attribute(uuid.UUID)`` pick
it up automatically.
"""

from __future__ import annotations

from typing import Any

from attrschema.attribute import Attribute
from attrschema.errors import AttrSchemaError, ConfigurationError, IncompatibleTypeError
from attrschema.options import AttributeOptions, PathPredicate
from attrschema.paths import DEFAULT_ROOT_CONTEXT, ROOT_PREFIX, SEPARATOR
from attrschema.resolver import DependencyResolver
from attrschema.types.base import OptionStatus, TypeKind, TypeVariant
from attrschema.types.collection import Collection
from attrschema.types.record import Record, RecordBuilder, RecordValue
from attrschema.types.registry import TypeRegistry
from attrschema.types.scalars import Boolean, DateTime, Float, Integer, Object, String

__all__ = [
    # Core pipeline
    "parse",
    "Attribute",
    "AttributeOptions",
    "PathPredicate",
    # Types
    "TypeVariant",
    "TypeKind",
    "OptionStatus",
    "TypeRegistry",
    "Integer",
    "Float",
    "String",
    "Boolean",
    "DateTime",
    "Object",
    "Collection",
    "Record",
    "RecordBuilder",
    "RecordValue",
    # Dependencies
    "DependencyResolver",
    "ROOT_PREFIX",
    "SEPARATOR",
    "DEFAULT_ROOT_CONTEXT",
    # Errors
    "AttrSchemaError",
    "ConfigurationError",
    "IncompatibleTypeError",
]


def parse(
    attribute: Attribute,
    value: Any,
    context: str = DEFAULT_ROOT_CONTEXT,
) -> tuple[Any, list[str]]:
    """Load ``value`` through ``attribute`` and validate the result.

    This is the main entry point::

        person = Record.builder("Person").attribute("name", String, required=True).build()
        loaded, errors = attrschema.parse(Attribute(person), '{"name": "Ada"}')

    Args:
        attribute: The attribute describing the expected shape.
        value: Raw input (native values, or JSON text for containers).
        context: Context path naming the root of ``value``.

    Returns:
        ``(loaded, errors)`` where ``errors`` is a list of messages.

    Raises:
        IncompatibleTypeError: If ``value`` cannot be loaded at all.
    """
    return attribute.parse(value, context)
