"""Abstract base class for all type variants.

Every data shape (scalar leaves, collections and records) implements the same
fixed operation set so :class:`~attrschema.attribute.Attribute` can drive
them without inspecting which variant it holds.

To add a new variant:

1. Subclass :class:`TypeVariant`.
2. Implement every abstract method.
3. Register it: ``TypeRegistry.register_type("uuid", variant=UUIDType())``.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from attrschema.errors import IncompatibleTypeError
from attrschema.paths import DEFAULT_ROOT_CONTEXT

if TYPE_CHECKING:
    from attrschema.attribute import Attribute
    from attrschema.resolver import DependencyResolver


class TypeKind(str, enum.Enum):
    """Tag identifying which family a variant belongs to."""

    SCALAR = "scalar"
    COLLECTION = "collection"
    RECORD = "record"


class OptionStatus(str, enum.Enum):
    """Outcome of :meth:`TypeVariant.check_option`."""

    OK = "ok"
    UNKNOWN = "unknown"


class TypeVariant(ABC):
    """Abstract type variant.

    Variants are stateless, shareable descriptors: many attributes may hold
    the same instance.  Subclasses set :attr:`kind` and :attr:`native_type`.
    """

    kind: TypeKind = TypeKind.SCALAR
    native_type: type = object

    @property
    def name(self) -> str:
        """Human-readable type name used in messages and ``describe``."""
        return type(self).__name__

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> Any:
        """Coerce ``value`` into the canonical value for this type.

        ``None`` loads to ``None``; absence is judged later by validation.

        Raises:
            IncompatibleTypeError: If ``value`` cannot be coerced.
        """

    @abstractmethod
    def valid_type(self, value: Any) -> bool:
        """Return whether ``value`` is a member of this type."""

    def validate(
        self,
        value: Any,
        context: str = DEFAULT_ROOT_CONTEXT,
        attribute: Attribute | None = None,
        resolver: DependencyResolver | None = None,
    ) -> list[str]:
        """Return type-specific errors beyond basic type membership."""
        return []

    def dump(self, value: Any, **opts: Any) -> Any:
        """Return the transport-friendly form of ``value``."""
        return value

    def describe(self, example: Any = None) -> dict[str, Any]:
        """Return structured metadata about this type."""
        return {"name": self.name, "kind": self.kind.value}

    @abstractmethod
    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> Any:
        """Generate an example value, reproducible for a given ``context``."""

    def check_option(self, name: str, value: Any) -> OptionStatus:
        """Accept or reject a type-specific attribute option.

        Returns:
            ``OptionStatus.OK`` for a recognised, valid option and
            ``OptionStatus.UNKNOWN`` for options this type does not know.

        Raises:
            ConfigurationError: For an invalid value of a recognised option.
        """
        return OptionStatus.UNKNOWN

    def check_option_set(self, options: Mapping[str, Any]) -> None:
        """Check combinations of type-specific options.

        Called once every option has passed :meth:`check_option`.

        Raises:
            ConfigurationError: If the options contradict each other.
        """

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def incompatible(
        self, value: Any, context: str, reason: str | None = None
    ) -> IncompatibleTypeError:
        """Build the load error for ``value`` at ``context``."""
        return IncompatibleTypeError(value, self.name, context, reason)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
