"""Attribute option models.

``AttributeOptions`` validates the generic option set every attribute
understands.  It is validated with the wrapped type variant passed through
pydantic's validation context, so checks such as "the default must be a
member of the attribute's type" run at definition time::

    options = AttributeOptions.model_validate(
        {"required_if": {"status": "active"}, "values": ["a", "b"]},
        context={"type": String()},
    )

Options the generic layer does not know are kept as pydantic extras and
handed to the type variant's ``check_option`` by
:class:`~attrschema.attribute.Attribute`.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from attrschema import paths
from attrschema.errors import ConfigurationError, IncompatibleTypeError

if TYPE_CHECKING:
    from attrschema.types.base import TypeVariant


@dataclass(frozen=True)
class PathPredicate:
    """A compiled ``required_if`` rule.

    Attributes:
        key_path: Absolute (``"$.status"``) or relative (``"status"``) path
            of the field the requirement depends on.
        predicate: ``None`` (field must be present), a literal (field must
            equal it), a compiled regex (field must match it) or a callable
            (field must make it return something truthy).
    """

    key_path: str
    predicate: Any = None

    @classmethod
    def from_option(cls, requirement: Any) -> PathPredicate:
        """Compile a ``required_if`` option value.

        Raises:
            ConfigurationError: If ``requirement`` is neither a key path
                string nor a single-entry ``{key_path: predicate}`` mapping.
        """
        if isinstance(requirement, str):
            return cls(requirement)
        if isinstance(requirement, Mapping) and len(requirement) == 1:
            ((key_path, predicate),) = requirement.items()
            if isinstance(key_path, str):
                return cls(key_path, predicate)
        raise ConfigurationError(
            "Required_if must be a key path string or a single-entry "
            f"{{key_path: predicate}} mapping. Got ({requirement!r})",
            option="required_if",
            value=requirement,
        )

    @property
    def is_absolute(self) -> bool:
        return paths.is_absolute(self.key_path)

    def describe(self) -> str:
        """Describe the condition, e.g. ``"matches 'active'"``."""
        if self.predicate is None:
            return "is present"
        if isinstance(self.predicate, re.Pattern):
            return f"matches pattern {self.predicate.pattern!r}"
        if callable(self.predicate):
            name = getattr(self.predicate, "__name__", repr(self.predicate))
            return f"satisfies {name}"
        return f"matches {self.predicate!r}"

    def as_option(self) -> Any:
        """Return the rule as plain data for ``describe`` output.

        Literal predicates are kept; patterns and callables become their
        :meth:`describe` text.
        """
        if self.predicate is None:
            return self.key_path
        if isinstance(self.predicate, re.Pattern) or callable(self.predicate):
            return {self.key_path: self.describe()}
        return {self.key_path: self.predicate}


def _type_from(info: ValidationInfo) -> TypeVariant | None:
    if isinstance(info.context, Mapping):
        return info.context.get("type")
    return None


def _loadable(type_variant: TypeVariant, value: Any) -> bool:
    if not (type_variant.valid_type(value) or isinstance(value, str)):
        return False
    try:
        type_variant.load(value)
    except IncompatibleTypeError:
        return False
    return True


class AttributeOptions(BaseModel):
    """The generic option set of an attribute.

    Attributes:
        required: Whether an absent value is an error.
        required_if: Conditional requirement on another field.
        default: Value substituted when the loaded value is absent.
        allowed_values: Allowed set of values (option name ``values``).
        description: Free-text description.
        example: Example hint (value, regex, or list of candidates).
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    required: bool = Field(False, strict=True)
    required_if: Any = None
    default: Any = None
    allowed_values: Any = Field(None, alias="values")
    description: str | None = Field(None, strict=True)
    example: Any = None

    @field_validator("allowed_values")
    @classmethod
    def _check_values(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, (list, tuple, set, frozenset)):
            raise ValueError(
                f"Allowed set of values requires a list, tuple or set. Got ({value!r})"
            )
        return value

    @field_validator("default")
    @classmethod
    def _check_default(cls, value: Any, info: ValidationInfo) -> Any:
        type_variant = _type_from(info)
        if value is not None and type_variant is not None and not type_variant.valid_type(value):
            raise ValueError(
                f"Default value doesn't have the correct attribute type. "
                f"Got ({value!r}) expected {type_variant.name}"
            )
        return value

    @field_validator("required_if")
    @classmethod
    def _check_required_if(cls, value: Any) -> Any:
        if value is not None:
            PathPredicate.from_option(value)
        return value

    @field_validator("example")
    @classmethod
    def _check_example(cls, value: Any, info: ValidationInfo) -> Any:
        type_variant = _type_from(info)
        if value is None or type_variant is None:
            return value
        if isinstance(value, re.Pattern) or _loadable(type_variant, value):
            return value
        if isinstance(value, list) and all(_loadable(type_variant, v) for v in value):
            return value
        raise ValueError(
            f"Invalid example type (got: {type(value).__name__}). It must match the "
            f"type of the attribute ({type_variant.name}), be a regex, or a list of "
            "candidate values"
        )

    @model_validator(mode="after")
    def _check_exclusions(self) -> AttributeOptions:
        if self.required:
            if "default" in self.model_fields_set:
                raise ValueError("Required cannot be enabled in combination with default")
            if self.required_if is not None:
                raise ValueError("Required_if cannot be specified together with required")
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def requirement(self) -> PathPredicate | None:
        """The compiled ``required_if`` rule, if any."""
        if self.required_if is None:
            return None
        return PathPredicate.from_option(self.required_if)

    @property
    def extras(self) -> dict[str, Any]:
        """Options not known to the generic layer (type-specific options)."""
        return dict(self.model_extra or {})

    def has(self, name: str) -> bool:
        """Return whether option ``name`` was configured."""
        return name in self.as_dict()

    def get(self, name: str, default: Any = None) -> Any:
        """Return option ``name`` by its configured name, or ``default``."""
        return self.as_dict().get(name, default)

    def as_dict(self) -> dict[str, Any]:
        """Return the configured options keyed by their option names."""
        result: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            if name in self.model_fields_set:
                result[field.alias or name] = getattr(self, name)
        result.update(self.extras)
        return result
