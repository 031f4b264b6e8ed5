"""Attribute: a constrained occurrence of a type variant.

An ``Attribute`` wraps one :class:`~attrschema.types.base.TypeVariant` plus
its options and drives the load → validate pipeline::

    status = Attribute(String, values=["active", "inactive"], required=True)
    value, errors = status.parse("active")

Options are checked when the attribute is built, so schema-authoring
mistakes raise :class:`~attrschema.errors.ConfigurationError` at definition
time rather than during validation.

Validation never raises for bad data: it returns a flat list of messages,
each prefixed with the dotted context of the offending node.
"""
from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from functools import cached_property
from typing import Any

import pydantic

from attrschema import paths
from attrschema.errors import ConfigurationError
from attrschema.examples import seeded_random, string_matching
from attrschema.options import AttributeOptions, PathPredicate
from attrschema.resolver import DependencyResolver
from attrschema.types.base import OptionStatus, TypeVariant
from attrschema.types.record import Record
from attrschema.types.registry import TypeRegistry

logger = logging.getLogger(__name__)


def _candidates(values: Any) -> list[Any]:
    # Sets have no stable order; sort them so seeded picks are reproducible.
    if isinstance(values, (set, frozenset)):
        return sorted(values, key=repr)
    return list(values)


def _is_allowed(value: Any, allowed: Any) -> bool:
    try:
        return value in allowed
    except TypeError:
        return any(value == candidate for candidate in allowed)


class Attribute:
    """A type variant plus per-field options.

    Args:
        type_spec: Anything :class:`~attrschema.types.registry.TypeRegistry`
            resolves (a variant instance or class, a Python type, a name).
        **options: Generic options (``required``, ``required_if``,
            ``default``, ``values``, ``description``, ``example``) and
            type-specific ones (``min``, ``max``, ``regexp``, ``size``).

    Raises:
        ConfigurationError: If the type cannot be resolved or an option is
            unknown or invalid.
    """

    def __init__(self, type_spec: Any, **options: Any) -> None:
        self.type: TypeVariant = TypeRegistry.resolve(type_spec)
        self._options = options
        self.check_options()

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def compiled_options(self) -> dict[str, Any]:
        """Return the effective raw options.

        Record-typed attributes inherit the record's own options; explicit
        attribute options override them.
        """
        if isinstance(self.type, Record):
            return {**self.type.options, **self._options}
        return dict(self._options)

    @cached_property
    def options(self) -> AttributeOptions:
        """The compiled, validated options (computed once)."""
        compiled = self.compiled_options()
        logger.debug("Compiling options %s for %s attribute", sorted(compiled), self.type.name)
        try:
            return AttributeOptions.model_validate(compiled, context={"type": self.type})
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            option = str(first["loc"][0]) if first["loc"] else None
            messages = "; ".join(error["msg"] for error in exc.errors())
            raise ConfigurationError(
                f"Invalid options for {self.type.name} attribute: {messages}",
                option=option,
                value=compiled.get(option) if option else None,
            ) from exc

    def check_options(self) -> None:
        """Validate every option; fail fast on anything unknown or invalid."""
        for name, value in self.options.extras.items():
            if self.type.check_option(name, value) is OptionStatus.UNKNOWN:
                raise ConfigurationError(
                    f"Unsupported option: {name} with value: {value!r} "
                    f"for {self.type.name} attribute",
                    option=name,
                    value=value,
                )
        self.type.check_option_set(self.options.extras)

    @property
    def requirement(self) -> PathPredicate | None:
        return self.options.requirement

    @property
    def attributes(self) -> Mapping[str, Attribute] | None:
        """Sub-attributes when the type is a record, else ``None``."""
        if isinstance(self.type, Record):
            return self.type.attributes
        return None

    # ------------------------------------------------------------------
    # Load / dump
    # ------------------------------------------------------------------

    def parse(
        self, value: Any, context: str = paths.DEFAULT_ROOT_CONTEXT
    ) -> tuple[Any, list[str]]:
        """Load ``value`` and validate the result.

        Returns:
            ``(loaded, errors)``.

        Raises:
            IncompatibleTypeError: If ``value`` cannot be loaded at all.
        """
        loaded = self.load(value, context)
        return loaded, self.validate(loaded, context)

    def load(self, value: Any, context: str = paths.DEFAULT_ROOT_CONTEXT) -> Any:
        if value is not None:
            value = self.type.load(value, context)
        if value is None and self.options.has("default"):
            value = copy.deepcopy(self.options.default)
        return value

    def dump(self, value: Any, **opts: Any) -> Any:
        return self.type.dump(value, **opts)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        value: Any,
        context: str = paths.DEFAULT_ROOT_CONTEXT,
        resolver: DependencyResolver | None = None,
    ) -> list[str]:
        """Return every problem found in ``value``.

        The outermost call binds a :class:`DependencyResolver` to ``value``
        so ``required_if`` rules anywhere below can query sibling fields.
        """
        with DependencyResolver.scope(value, context, resolver) as active:
            if value is None:
                return self.validate_missing_value(context, active)

            errors = self.validate_type(value, context)
            if errors:
                return errors

            allowed = self.options.allowed_values
            if allowed is not None and not _is_allowed(value, allowed):
                errors.append(
                    f"Attribute {context}: {value!r} is not within the allowed "
                    f"values={_candidates(allowed)!r}"
                )
            return errors + self.type.validate(value, context, self, active)

    def validate_type(self, value: Any, context: str) -> list[str]:
        if not self.type.valid_type(value):
            return [
                f"Attribute {context} received value: {value!r} is of the wrong type "
                f"(got: {type(value).__name__} expected: {self.type.name})"
            ]
        return []

    def validate_missing_value(
        self, context: str, resolver: DependencyResolver | None = None
    ) -> list[str]:
        """Judge an absent value: required, conditionally required, or fine."""
        if self.options.required:
            return [f"Attribute {context} is required"]

        requirement = self.requirement
        if requirement is None:
            return []

        resolver = resolver or DependencyResolver.current()
        if resolver is None:
            return []

        requirement_context = paths.parent(context)
        if not resolver.check(requirement_context, requirement.key_path, requirement.predicate):
            return []

        message = f"Attribute {context} is required when {requirement.key_path} "
        if not requirement.is_absolute:
            resolved = resolver.resolve_path(requirement_context, requirement.key_path)
            message += f"(for {resolved}) "
        return [f"{message}{requirement.describe()}."]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def describe(self, example: Any = None) -> dict[str, Any]:
        """Return the type description merged with the compiled options.

        Example data is included only when ``example`` is given.
        """
        description: dict[str, Any] = {"type": self.type.describe(example=example)}
        for name, value in self.options.as_dict().items():
            if name == "example":
                continue
            if name == "default":
                value = self.dump(value)
            elif name == "values":
                value = [self.dump(candidate) for candidate in _candidates(value)]
            elif name == "required_if" and value is not None:
                value = self.requirement.as_option()
            elif isinstance(value, re.Pattern):
                value = value.pattern
            description[name] = value
        if example is not None:
            description["example"] = self.dump(example)
        return description

    def example(self, context: str | None = None) -> Any:
        """Generate an example, honouring the ``example`` and ``values`` options.

        The same non-empty ``context`` always yields the same example.
        """
        rng = seeded_random(context)
        load_context = context or paths.DEFAULT_ROOT_CONTEXT
        hint = self.options.example

        if hint is None:
            allowed = self.options.allowed_values
            if allowed:
                return rng.choice(_candidates(allowed))
            return self.type.example(self.options.as_dict(), context)
        if isinstance(hint, re.Pattern):
            return self.load(string_matching(hint, rng), load_context)
        if self.type.valid_type(hint):
            return self.load(copy.deepcopy(hint), load_context)
        if isinstance(hint, list):
            return self.load(rng.choice(hint), load_context)
        return self.load(hint, load_context)

    def __repr__(self) -> str:
        return f"Attribute({self.type!r}, **{self._options!r})"
