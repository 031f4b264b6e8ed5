"""Structured records: a fixed, ordered set of named attributes.

Records are declared through :class:`RecordBuilder`: compose exactly the
fields you need, then freeze them with :meth:`RecordBuilder.build`::

    from attrschema import Collection, Integer, Record, String

    address = (
        Record.builder("Address")
        .attribute("street", String, required=True)
        .attribute("zip", String, regexp=r"^\\d{5}$")
        .build()
    )

    person = (
        Record.builder("Person", description="A person we know about")
        .attribute("name", String, required=True)
        .attribute("age", Integer, min=0)
        .attribute("address", address)
        .attribute("tags", Collection.of(String))
        .build()
    )

Loading produces a :class:`RecordValue`, a read-only mapping that also keeps
any input keys the record does not declare so validation can report them.
"""
from __future__ import annotations

import copy
import json
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from attrschema import paths
from attrschema.errors import ConfigurationError
from attrschema.resolver import DependencyResolver
from attrschema.types.base import TypeKind, TypeVariant

if TYPE_CHECKING:
    from attrschema.attribute import Attribute


class RecordValue(Mapping[str, Any]):
    """A loaded record instance.

    Behaves as a mapping of the declared fields that have a value; declared
    fields are also reachable as attributes (``person.name``), returning
    ``None`` when absent.

    Attributes:
        record: The :class:`Record` this value was loaded for.
        extra: Input keys the record does not declare, with their raw values.
    """

    def __init__(
        self,
        record: Record,
        values: Mapping[str, Any],
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        self._record = record
        self._values = dict(values)
        self._extra = dict(extra or {})

    @property
    def record(self) -> Record:
        return self._record

    @property
    def extra(self) -> Mapping[str, Any]:
        return MappingProxyType(self._extra)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and name in self._record.attributes:
            return self._values.get(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __deepcopy__(self, memo: dict) -> RecordValue:
        # The record type is a shared schema descriptor and is never copied.
        return RecordValue(
            self._record,
            copy.deepcopy(self._values, memo),
            copy.deepcopy(self._extra, memo),
        )

    def __repr__(self) -> str:
        return f"{self._record.name}({self._values!r})"


class Record(TypeVariant):
    """A record type with a fixed set of named attributes.

    Args:
        attributes: Ordered mapping of field name to attribute.
        name: Optional type name used in messages and ``describe``.
        options: Record-level options inherited by every attribute that uses
            this record as its type (explicit attribute options win).
    """

    kind = TypeKind.RECORD
    native_type = dict

    def __init__(
        self,
        attributes: Mapping[str, Attribute],
        name: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self.attributes: Mapping[str, Attribute] = MappingProxyType(dict(attributes))
        self.options: Mapping[str, Any] = MappingProxyType(dict(options or {}))
        self._name = name

    @classmethod
    def builder(cls, name: str | None = None, **options: Any) -> RecordBuilder:
        """Return a :class:`RecordBuilder` to declare fields.

        Args:
            name: Optional record type name.
            **options: Record-level default options.
        """
        return RecordBuilder(name=name, options=options)

    @property
    def name(self) -> str:
        return self._name or "Record"

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def load(self, value: Any, context: str = paths.DEFAULT_ROOT_CONTEXT) -> RecordValue | None:
        if value is None:
            return None
        if isinstance(value, RecordValue) and value.record is self:
            return value
        if isinstance(value, (str, bytes, bytearray)):
            value = self.decode_json(value, context)
        if not isinstance(value, Mapping):
            raise self.incompatible(value, context)

        values: dict[str, Any] = {}
        for name, attribute in self.attributes.items():
            loaded = attribute.load(value.get(name), paths.join(context, name))
            if loaded is not None:
                values[name] = loaded
        extra = {key: raw for key, raw in value.items() if key not in self.attributes}
        return RecordValue(self, values, extra)

    def decode_json(self, value: str | bytes | bytearray, context: str) -> dict:
        """Decode JSON text that must hold an object."""
        try:
            decoded = json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self.incompatible(value, context, f"invalid JSON: {exc}") from exc
        if not isinstance(decoded, dict):
            raise self.incompatible(value, context, "JSON value is not an object")
        return decoded

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def validate(
        self,
        value: Any,
        context: str = paths.DEFAULT_ROOT_CONTEXT,
        attribute: Attribute | None = None,
        resolver: DependencyResolver | None = None,
    ) -> list[str]:
        if not self.valid_type(value):
            raise TypeError(f"can not validate object of type {type(value).__name__}")
        errors: list[str] = []
        with DependencyResolver.scope(value, context, resolver) as active:
            for name, sub_attribute in self.attributes.items():
                errors.extend(
                    sub_attribute.validate(
                        value.get(name), paths.join(context, name), resolver=active
                    )
                )
        for key in self.unknown_keys(value):
            errors.append(f"Attribute {context}: unknown key received: {key!r}")
        return errors

    def unknown_keys(self, value: Mapping[str, Any]) -> list[Any]:
        """Return the keys of ``value`` this record does not declare."""
        if isinstance(value, RecordValue):
            return list(value.extra)
        return [key for key in value if key not in self.attributes]

    def dump(self, value: Any, **opts: Any) -> Any:
        if value is None:
            return None
        return {
            name: self.attributes[name].dump(member, **opts)
            for name, member in value.items()
            if name in self.attributes
        }

    def describe(self, example: Any = None) -> dict[str, Any]:
        description = super().describe()
        description["attributes"] = {
            name: attribute.describe(
                example=example.get(name) if example is not None else None
            )
            for name, attribute in self.attributes.items()
        }
        return description

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> RecordValue:
        values = {
            name: attribute.example(paths.join(context, name) if context else None)
            for name, attribute in self.attributes.items()
        }
        return RecordValue(self, values)

    def __repr__(self) -> str:
        return f"Record({self.name!r}, fields={list(self.attributes)!r})"


class RecordBuilder:
    """Fluent builder for :class:`Record`.

    Always obtained via :meth:`Record.builder`.  Fields keep their declaration
    order; each name may be declared once.
    """

    def __init__(
        self,
        name: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self._name = name
        self._options = dict(options or {})
        self._attributes: dict[str, Attribute] = {}

    def attribute(self, name: str, type_spec: Any, **options: Any) -> RecordBuilder:
        """Declare field ``name`` of type ``type_spec`` with ``options``.

        Raises:
            ConfigurationError: On an invalid or duplicate field name, or
                invalid options.
        """
        from attrschema.attribute import Attribute

        if not isinstance(name, str) or not name or paths.SEPARATOR in name:
            raise ConfigurationError(
                f"Field name must be a non-empty string without {paths.SEPARATOR!r}. "
                f"Got ({name!r})",
                option="name",
                value=name,
            )
        if name in self._attributes:
            raise ConfigurationError(
                f"Field {name!r} is already declared on {self._name or 'Record'}.",
                option="name",
                value=name,
            )
        if isinstance(type_spec, Attribute) and not options:
            self._attributes[name] = type_spec
        else:
            self._attributes[name] = Attribute(type_spec, **options)
        return self

    def build(self) -> Record:
        """Freeze the declared fields into a :class:`Record`.

        Raises:
            ConfigurationError: If the record-level options are invalid.
        """
        from attrschema.attribute import Attribute

        record = Record(self._attributes, name=self._name, options=self._options)
        # Record-level options must hold for a bare attribute of this record.
        Attribute(record)
        return record
