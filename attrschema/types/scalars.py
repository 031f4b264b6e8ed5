"""Scalar leaf types.

Coercion of loosely typed input is delegated to pydantic ``TypeAdapter``s in
lax mode, so ``"42"`` loads as ``42`` for :class:`Integer` and
``"2001-02-03T04:05:06+07:00"`` as a timezone-aware ``datetime`` for
:class:`DateTime`.  Anything pydantic refuses becomes an
:class:`~attrschema.errors.IncompatibleTypeError` carrying the context path.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any

import pydantic
from pydantic import FiniteFloat, TypeAdapter

from attrschema.errors import ConfigurationError
from attrschema.examples import fake_word, seeded_random, string_matching
from attrschema.paths import DEFAULT_ROOT_CONTEXT
from attrschema.types.base import OptionStatus, TypeVariant

if TYPE_CHECKING:
    from attrschema.attribute import Attribute
    from attrschema.resolver import DependencyResolver

_INT_ADAPTER: TypeAdapter[int] = TypeAdapter(int)
_FLOAT_ADAPTER: TypeAdapter[float] = TypeAdapter(FiniteFloat)
_BOOL_ADAPTER: TypeAdapter[bool] = TypeAdapter(bool)
_DATETIME_ADAPTER: TypeAdapter[datetime] = TypeAdapter(datetime)

#: Largest timestamp produced by DateTime examples (2038-01-19).
_MAX_EXAMPLE_TIMESTAMP = 2**31 - 1


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _options(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return options if options is not None else {}


class _Numeric(TypeVariant):
    """Shared ``min`` / ``max`` handling for Integer and Float."""

    _adapter: TypeAdapter

    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> Any:
        if value is None:
            return None
        if isinstance(value, bool):
            raise self.incompatible(value, context)
        try:
            return self._adapter.validate_python(value)
        except pydantic.ValidationError as exc:
            raise self.incompatible(value, context, exc.errors()[0]["msg"]) from exc

    def validate(
        self,
        value: Any,
        context: str = DEFAULT_ROOT_CONTEXT,
        attribute: Attribute | None = None,
        resolver: DependencyResolver | None = None,
    ) -> list[str]:
        if attribute is None:
            return []
        errors = []
        minimum = attribute.options.get("min")
        maximum = attribute.options.get("max")
        if minimum is not None and value < minimum:
            errors.append(
                f"Attribute {context}: value ({value}) is smaller than the allowed min ({minimum})"
            )
        if maximum is not None and value > maximum:
            errors.append(
                f"Attribute {context}: value ({value}) is larger than the allowed max ({maximum})"
            )
        return errors

    def check_option(self, name: str, value: Any) -> OptionStatus:
        if name in ("min", "max"):
            if not _is_number(value):
                raise ConfigurationError(
                    f"Option {name} for {self.name} must be a number. Got ({value!r})",
                    option=name,
                    value=value,
                )
            return OptionStatus.OK
        return OptionStatus.UNKNOWN

    def check_option_set(self, options: Mapping[str, Any]) -> None:
        minimum, maximum = options.get("min"), options.get("max")
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ConfigurationError(
                f"Option min ({minimum!r}) for {self.name} is larger than max ({maximum!r})",
                option="min",
                value=minimum,
            )

    def _bounds(self, options: Mapping[str, Any], span: int) -> tuple[Any, Any]:
        low, high = options.get("min"), options.get("max")
        if low is None:
            low = 0 if high is None else min(0, high)
        if high is None:
            high = low + span
        return low, high


class Integer(_Numeric):
    """Whole numbers.  ``bool`` is rejected even though it subclasses ``int``."""

    native_type = int
    _adapter = _INT_ADAPTER

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> int:
        rng = seeded_random(context)
        low, high = self._bounds(_options(options), 1000)
        return rng.randint(int(low), int(high))


class Float(_Numeric):
    """Floating point numbers.  Integers are accepted as valid members."""

    native_type = float
    _adapter = _FLOAT_ADAPTER

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> float:
        rng = seeded_random(context)
        low, high = self._bounds(_options(options), 100)
        return rng.uniform(float(low), float(high))


class String(TypeVariant):
    """Text.  Numbers load through ``str()``; ``bytes`` are decoded as UTF-8."""

    native_type = str

    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise self.incompatible(value, context, str(exc)) from exc
        if _is_number(value):
            return str(value)
        raise self.incompatible(value, context)

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, str)

    def validate(
        self,
        value: Any,
        context: str = DEFAULT_ROOT_CONTEXT,
        attribute: Attribute | None = None,
        resolver: DependencyResolver | None = None,
    ) -> list[str]:
        if attribute is None:
            return []
        pattern = attribute.options.get("regexp")
        if pattern is not None and not re.search(pattern, value):
            shown = pattern.pattern if isinstance(pattern, re.Pattern) else pattern
            return [f"Attribute {context}: value ({value!r}) does not match regexp ({shown!r})"]
        return []

    def check_option(self, name: str, value: Any) -> OptionStatus:
        if name != "regexp":
            return OptionStatus.UNKNOWN
        if isinstance(value, re.Pattern):
            return OptionStatus.OK
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Option regexp must be a string or compiled pattern. Got ({value!r})",
                option=name,
                value=value,
            )
        try:
            re.compile(value)
        except re.error as exc:
            raise ConfigurationError(
                f"Option regexp is not a valid regular expression: {exc}",
                option=name,
                value=value,
            ) from exc
        return OptionStatus.OK

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> str:
        rng = seeded_random(context)
        pattern = _options(options).get("regexp")
        if pattern is not None:
            return string_matching(pattern, rng)
        return fake_word(rng)


class Boolean(TypeVariant):
    """``True`` / ``False``; loads ``"true"``, ``"no"``, ``1``, ``"off"`` and friends."""

    native_type = bool

    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> bool | None:
        if value is None or isinstance(value, bool):
            return value
        try:
            return _BOOL_ADAPTER.validate_python(value)
        except pydantic.ValidationError as exc:
            raise self.incompatible(value, context, exc.errors()[0]["msg"]) from exc

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, bool)

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> bool:
        return seeded_random(context).choice([True, False])


class DateTime(TypeVariant):
    """Timestamps.

    Loads ``datetime`` and ``date`` objects, ISO-8601 strings and unix
    timestamps (via pydantic) and RFC 2822 strings such as
    ``"Sat, 3 Feb 2001 04:05:06 +0700"``.  Dumps ISO-8601 text.
    """

    native_type = datetime

    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> datetime | None:
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time())
        if isinstance(value, bool):
            raise self.incompatible(value, context)
        try:
            return _DATETIME_ADAPTER.validate_python(value)
        except pydantic.ValidationError as exc:
            if isinstance(value, str):
                try:
                    return parsedate_to_datetime(value)
                except (TypeError, ValueError):
                    pass
            raise self.incompatible(value, context, exc.errors()[0]["msg"]) from exc

    def valid_type(self, value: Any) -> bool:
        return isinstance(value, datetime)

    def dump(self, value: Any, **opts: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return value

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> datetime:
        rng = seeded_random(context)
        return datetime.fromtimestamp(rng.randint(0, _MAX_EXAMPLE_TIMESTAMP), tz=timezone.utc)


class Object(TypeVariant):
    """Any value at all; load and dump are the identity."""

    native_type = object

    def load(self, value: Any, context: str = DEFAULT_ROOT_CONTEXT) -> Any:
        return value

    def valid_type(self, value: Any) -> bool:
        return True

    def example(
        self,
        options: Mapping[str, Any] | None = None,
        context: str | None = None,
    ) -> str:
        return fake_word(seeded_random(context))
