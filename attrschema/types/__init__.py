"""Type variants: scalar leaves, collections, and records."""

from attrschema.types.base import OptionStatus, TypeKind, TypeVariant
from attrschema.types.collection import Collection
from attrschema.types.record import Record, RecordBuilder, RecordValue
from attrschema.types.registry import TypeRegistry
from attrschema.types.scalars import Boolean, DateTime, Float, Integer, Object, String

__all__ = [
    "TypeVariant",
    "TypeKind",
    "OptionStatus",
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
    "TypeRegistry",
]
