"""Ordered collection of a single member type.

``Collection.of(Integer)`` loads ``["1", "2", 3]`` as ``[1, 2, 3]`` and also
accepts the same data as JSON text (``'["1", "2", 3]'``).  Each element is
handled by the collection's *member attribute*, so element errors carry an
index-qualified context such as ``"$.scores.2"``.
"""
from __future__ import annotations

import json
import random
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from attrschema import paths
from attrschema.errors import ConfigurationError
from attrschema.examples import seeded_random
from attrschema.resolver import DependencyResolver
from attrschema.types.base import OptionStatus, TypeKind, TypeVariant

if TYPE_CHECKING:
    from attrschema.attribute import Attribute

#: Element count range used by ``example`` when no ``size`` is given.
DEFAULT_EXAMPLE_SIZE = (1, 3)

_SEQUENCE_INPUTS = (list, tuple, set, frozenset)


def _is_size(size: Any) -> bool:
    if isinstance(size, bool):
        return False
    if isinstance(size, int):
        return size >= 0
    if isinstance(size, range):
        return len(size) > 0 and size.start >= 0 and size.step > 0
    if isinstance(size, tuple) and len(size) == 2:
        low, high = size
        return (
            all(isinstance(v, int) and not isinstance(v, bool) for v in size)
            and 0 <= low <= high
        )
    return False


def _size_allows(size: Any, length: int) -> bool:
    if isinstance(size, int):
        return length == size
    if isinstance(size, range):
        return length in size
    low, high = size
    return low <= length <= high


def _pick_size(size: Any, rng: random.Random) -> int:
    if size is None:
        size = DEFAULT_EXAMPLE_SIZE
    if isinstance(size, int):
        return size
    if isinstance(size, range):
        return rng.choice(size)
    return rng.randint(*size)


class Collection(TypeVariant):
    """A list whose elements all share one member type.

    Args:
        member_type: Anything :class:`~attrschema.types.registry.TypeRegistry`
            resolves; defaults to :class:`~attrschema.types.scalars.Object`.
        **member_options: Options for the member attribute.
    """

    kind = TypeKind.COLLECTION
    native_type = list

    def __init__(self, member_type: Any = None, **member_options: Any) -> None:
        from attrschema.attribute import Attribute
        from attrschema.types.scalars import Object

        self.member_attribute = Attribute(
            member_type if member_type is not None else Object, **member_options
        )

    @classmethod
    def of(cls, member_type: Any, **member_options: Any) -> Collection:
        """Return a collection of ``member_type``."""
        return cls(member_type, **member_options)

    @property
    def member_type(self) -> TypeVariant:
        return self.member_attribute.type

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def load(self, value: Any, context: str = paths.DEFAULT_ROOT_CONTEXT) -> list | None:
        if value is None:
            return None
        if isinstance(value, (str, bytes, bytearray)):
            value = self.decode_json(value, context)
        if not isinstance(value, _SEQUENCE_INPUTS):
            raise self.incompatible(value, context)
        return [
            self.member_attribute.load(member, paths.join(context, index))
            for index, member in enumerate(value)
        ]

    def decode_json(self, value: str | bytes | bytearray, context: str) -> list:
        """Decode JSON text that must hold an array.

        Raises:
            IncompatibleTypeError: On malformed JSON or a non-array value.
        """
        try:
            decoded = json.loads(value)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self.incompatible(value, context, f"invalid JSON: {exc}") from exc
        if not isinstance(decoded, list):
            raise self.incompatible(value, context, "JSON value is not an array")
        return decoded

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, (list, tuple))

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
        size = attribute.options.get("size") if attribute is not None else None
        if size is not None and not _size_allows(size, len(value)):
            errors.append(
                f"Attribute {context}: collection size ({len(value)}) is not within "
                f"the allowed size ({size!r})"
            )
        with DependencyResolver.scope(value, context, resolver) as active:
            for index, member in enumerate(value):
                errors.extend(
                    self.member_attribute.validate(
                        member, paths.join(context, index), resolver=active
                    )
                )
        return errors

    def dump(self, value: Any, **opts: Any) -> Any:
        if value is None:
            return None
        return [self.member_attribute.dump(member, **opts) for member in value]

    def describe(self, example: Any = None) -> dict[str, Any]:
        description = super().describe()
        member_example = example[0] if example else None
        description["member_attribute"] = self.member_attribute.describe(example=member_example)
        return description

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> list:
        rng = seeded_random(context)
        count = _pick_size((options or {}).get("size"), rng)
        return [
            self.member_attribute.example(paths.join(context, index) if context else None)
            for index in range(count)
        ]

    def check_option(self, name: str, value: Any) -> OptionStatus:
        if name != "size":
            return OptionStatus.UNKNOWN
        if not _is_size(value):
            raise ConfigurationError(
                "Option size must be a non-negative int, a range, or an inclusive "
                f"(min, max) tuple. Got ({value!r})",
                option=name,
                value=value,
            )
        return OptionStatus.OK

    def __repr__(self) -> str:
        return f"Collection.of({self.member_type!r})"
