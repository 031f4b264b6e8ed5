"""Type registry (Open/Closed Principle).

Attributes accept loose type specifications, such as ``Attribute(int)``,
``Attribute("string")``, ``Attribute(Integer)`` or ``Attribute(Integer())``,
and :class:`TypeRegistry` turns each into a :class:`TypeVariant` instance.
New variants are registered once and become usable everywhere::

    @TypeRegistry.register("uuid", uuid.UUID)
    class UUIDType(TypeVariant):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any, ClassVar

from attrschema.errors import ConfigurationError
from attrschema.types.base import TypeVariant
from attrschema.types.collection import Collection
from attrschema.types.scalars import Boolean, DateTime, Float, Integer, Object, String

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Registry mapping Python types and names to type variants.

    Example::

        TypeRegistry.register_type("money", decimal.Decimal, variant=MoneyType())
        attribute = Attribute("money")
    """

    _types: ClassVar[dict[Any, Callable[[], TypeVariant]]] = {}

    @classmethod
    def register(
        cls, *keys: Any
    ) -> Callable[[type[TypeVariant]], type[TypeVariant]]:
        """Decorator that registers a variant class under every key in ``keys``.

        Returns:
            A decorator that registers and returns the variant class.
        """

        def decorator(variant_cls: type[TypeVariant]) -> type[TypeVariant]:
            for key in keys:
                cls._types[key] = variant_cls
            logger.debug("Registered %s for %s", variant_cls.__name__, keys)
            return variant_cls

        return decorator

    @classmethod
    def register_type(cls, *keys: Any, variant: TypeVariant | type[TypeVariant]) -> None:
        """Register a variant instance or class without the decorator form."""
        if isinstance(variant, TypeVariant):
            factory: Callable[[], TypeVariant] = lambda: variant  # noqa: E731
        else:
            factory = variant
        for key in keys:
            cls._types[key] = factory
        logger.debug("Registered %r for %s", variant, keys)

    @classmethod
    def resolve(cls, type_spec: Any) -> TypeVariant:
        """Return the :class:`TypeVariant` for ``type_spec``.

        Raises:
            ConfigurationError: If nothing is registered for ``type_spec``.
        """
        if isinstance(type_spec, TypeVariant):
            return type_spec
        if isinstance(type_spec, type) and issubclass(type_spec, TypeVariant):
            return type_spec()
        try:
            factory = cls._types.get(type_spec)
        except TypeError:
            factory = None
        if factory is None:
            raise ConfigurationError(
                f"Unsupported type: {type_spec!r}. Registered types: "
                f"{cls.registered_names()}.",
                option="type",
                value=type_spec,
            )
        return factory()

    @classmethod
    def registered_names(cls) -> list[str]:
        """Return the sorted list of registered type names."""
        return sorted(key for key in cls._types if isinstance(key, str))


TypeRegistry.register_type("integer", int, variant=Integer)
TypeRegistry.register_type("float", float, variant=Float)
TypeRegistry.register_type("string", str, variant=String)
TypeRegistry.register_type("boolean", bool, variant=Boolean)
TypeRegistry.register_type("datetime", datetime, date, variant=DateTime)
TypeRegistry.register_type("object", object, variant=Object)
TypeRegistry.register_type("collection", list, variant=Collection)
