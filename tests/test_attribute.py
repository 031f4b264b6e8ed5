"""Unit tests for Attribute: options, load/validate pipeline, describe, example."""
from __future__ import annotations

import re

import pytest

from attrschema import (
    Attribute,
    AttributeOptions,
    Collection,
    ConfigurationError,
    DateTime,
    IncompatibleTypeError,
    Integer,
    Record,
    String,
    parse,
)
from tests.fixtures import account_document


# ---------------------------------------------------------------------------
# Option checks
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "options",
    [
        {"bogus": 1},
        {"required": True, "default": 1},
        {"required": True, "required_if": "other"},
        {"default": "not an int"},
        {"values": "abc"},
        {"values": 3},
        {"description": 5},
        {"required": "yes"},
        {"required_if": {"a": 1, "b": 2}},
        {"required_if": {1: "x"}},
        {"required_if": lambda value: value},
        {"example": "abc"},
        {"example": ["1", "x"]},
        {"example": 2.5},
    ],
)
def test_invalid_options_raise(options):
    with pytest.raises(ConfigurationError):
        Attribute(Integer, **options)


@pytest.mark.parametrize(
    "options",
    [
        {"required": True},
        {"required": False, "default": 3},
        {"required_if": "other"},
        {"required_if": {"$.mode": "strict"}},
        {"required_if": {"status": re.compile("^act")}},
        {"required_if": {"count": lambda count: count > 3}},
        {"values": [1, 2, 3]},
        {"values": (1, 2)},
        {"values": {1, 2}},
        {"description": "How many"},
        {"example": 42},
        {"example": "42"},
        {"example": [1, "2"]},
        {"example": re.compile(r"\d{2}")},
        {"min": 0, "max": 10},
    ],
)
def test_valid_options_accepted(options):
    Attribute(Integer, **options)


def test_unknown_option_error_names_option():
    with pytest.raises(ConfigurationError) as exc_info:
        Attribute(Integer, bogus=1)
    assert exc_info.value.option == "bogus"
    assert exc_info.value.value == 1


def test_invalid_default_error_names_option():
    with pytest.raises(ConfigurationError) as exc_info:
        Attribute(Integer, default="x")
    assert exc_info.value.option == "default"


def test_unknown_type_raises():
    with pytest.raises(ConfigurationError, match="Unsupported type"):
        Attribute(complex)


def test_options_model_exposes_names():
    attribute = Attribute(Integer, values=[1, 2], min=0)
    assert isinstance(attribute.options, AttributeOptions)
    assert attribute.options.allowed_values == [1, 2]
    assert attribute.options.get("values") == [1, 2]
    assert attribute.options.get("min") == 0
    assert attribute.options.as_dict() == {"values": [1, 2], "min": 0}


def test_options_are_compiled_once():
    attribute = Attribute(Integer, min=0)
    assert attribute.options is attribute.options


# ---------------------------------------------------------------------------
# Record-level option merging
# ---------------------------------------------------------------------------


def _thing(**options) -> Record:
    return Record.builder("Thing", **options).attribute("id", Integer).build()


def test_record_options_are_inherited():
    attribute = Attribute(_thing(description="A thing"))
    assert attribute.options.description == "A thing"


def test_explicit_options_override_record_options():
    attribute = Attribute(_thing(description="A thing"), description="Override")
    assert attribute.options.description == "Override"


def test_record_required_conflicts_with_attribute_default():
    thing = _thing(required=True)
    with pytest.raises(ConfigurationError):
        Attribute(thing, default={"id": 1})


def test_non_record_attributes_use_explicit_options():
    assert Attribute(Integer, min=1).compiled_options() == {"min": 1}


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def test_load_delegates_to_type():
    assert Attribute(Integer).load("12") == 12


def test_load_applies_default_when_absent():
    attribute = Attribute(Integer, default=7)
    assert attribute.load(None) == 7
    assert attribute.load("3") == 3


def test_falsy_default_is_applied():
    assert Attribute(Integer, default=0).load(None) == 0


def test_mutable_default_is_copied():
    attribute = Attribute(Collection.of(Integer), default=[1])
    first = attribute.load(None)
    first.append(2)
    assert attribute.load(None) == [1]


def test_parse_returns_value_and_errors():
    assert Attribute(Integer, values=[1, 2]).parse("2") == (2, [])
    value, errors = Attribute(Integer, values=[1, 2]).parse("5", "$.n")
    assert value == 5
    assert errors == ["Attribute $.n: 5 is not within the allowed values=[1, 2]"]


def test_parse_raises_for_incompatible_input():
    with pytest.raises(IncompatibleTypeError):
        Attribute(Integer).parse("five")


def test_module_level_parse(account_attribute):
    loaded, errors = parse(account_attribute, account_document())
    assert errors == []
    assert loaded["name"] == "Ada"


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------


def test_absent_optional_value_is_fine():
    assert Attribute(Integer).validate(None) == []


def test_absent_required_value():
    assert Attribute(Integer, required=True).validate(None, "$.count") == [
        "Attribute $.count is required"
    ]


def test_allowed_values_with_unhashable_members():
    attribute = Attribute(Collection.of(Integer), values=[[1, 2], [3]])
    assert attribute.validate([3]) == []
    assert len(attribute.validate([4], "$.pair")) == 1


def test_required_if_fires_when_sibling_matches(account_attribute):
    _, errors = account_attribute.parse(account_document(manager=None))
    assert errors == [
        "Attribute $.manager is required when status (for $.status) matches 'active'."
    ]


def test_required_if_silent_when_sibling_differs(account_attribute):
    document = account_document(
        status="inactive", manager=None, closed_at="2020-01-01T00:00:00Z"
    )
    _, errors = account_attribute.parse(document)
    assert errors == []


def test_required_if_other_branch(account_attribute):
    _, errors = account_attribute.parse(account_document(status="inactive", manager=None))
    assert errors == [
        "Attribute $.closed_at is required when status (for $.status) matches 'inactive'."
    ]


def test_required_if_presence():
    record = (
        Record.builder()
        .attribute("email", String)
        .attribute("email_verified_at", DateTime, required_if="email")
        .build()
    )
    _, errors = Attribute(record).parse({"email": "a@example.com"})
    assert errors == [
        "Attribute $.email_verified_at is required when email (for $.email) is present."
    ]
    assert Attribute(record).parse({})[1] == []


def test_required_if_absolute_path_has_no_hint():
    inner = Record.builder().attribute("reason", String, required_if={"$.mode": "strict"}).build()
    outer = Record.builder().attribute("mode", String).attribute("detail", inner).build()
    _, errors = Attribute(outer).parse({"mode": "strict", "detail": {}})
    assert errors == ["Attribute $.detail.reason is required when $.mode matches 'strict'."]


def test_required_if_callable_predicate():
    record = (
        Record.builder()
        .attribute("count", Integer)
        .attribute("justification", String, required_if={"count": lambda count: count > 3})
        .build()
    )
    _, errors = Attribute(record).parse({"count": 5})
    assert len(errors) == 1
    assert "satisfies <lambda>" in errors[0]
    assert Attribute(record).parse({"count": 2})[1] == []


def test_required_if_regex_predicate():
    record = (
        Record.builder()
        .attribute("status", String)
        .attribute("owner", String, required_if={"status": re.compile("^act")})
        .build()
    )
    assert len(Attribute(record).parse({"status": "active"})[1]) == 1
    assert Attribute(record).parse({"status": "closed"})[1] == []


def test_required_if_without_document_is_silent():
    assert Attribute(Integer, required_if="other").validate(None, "$.x") == []


# ---------------------------------------------------------------------------
# Describe
# ---------------------------------------------------------------------------


def test_describe_merges_options():
    attribute = Attribute(String, description="Name", required=True, regexp=r"^\w+$")
    assert attribute.describe() == {
        "type": {"name": "String", "kind": "scalar"},
        "required": True,
        "description": "Name",
        "regexp": r"^\w+$",
    }


def test_describe_omits_example_hint():
    described = Attribute(Integer, example=42).describe()
    assert "example" not in described


def test_describe_with_example_dumps_it():
    described = Attribute(DateTime).describe(example=DateTime().load("2001-02-03T04:05:06Z"))
    assert described["example"] == "2001-02-03T04:05:06+00:00"


def test_describe_record_attribute_includes_record_options():
    thing = _thing(description="A thing")
    described = Attribute(thing).describe()
    assert described["description"] == "A thing"
    assert list(described["type"]["attributes"]) == ["id"]


def test_describe_compiled_regexp_as_pattern():
    described = Attribute(String, regexp=re.compile("^a")).describe()
    assert described["regexp"] == "^a"


# ---------------------------------------------------------------------------
# Example
# ---------------------------------------------------------------------------


def test_example_from_values():
    assert Attribute(Integer, values=[1, 2, 3]).example("ctx") in (1, 2, 3)


def test_example_from_values_set_is_reproducible():
    attribute = Attribute(String, values={"a", "b", "c", "d"})
    assert attribute.example("ctx") == attribute.example("ctx")


def test_example_literal_hint():
    assert Attribute(Integer, example=42).example() == 42


def test_example_string_hint_is_loaded():
    assert Attribute(Integer, example="42").example() == 42


def test_example_list_hint_picks_one():
    for index in range(10):
        assert Attribute(Integer, example=[5, "6"]).example(f"pick.{index}") in (5, 6)


def test_example_regex_hint():
    attribute = Attribute(String, example=re.compile(r"[A-Z]{3}-\d{2}"))
    assert re.fullmatch(r"[A-Z]{3}-\d{2}", attribute.example("code"))


def test_example_collection_literal_hint():
    assert Attribute(Collection.of(Integer), example=[1, 2]).example() == [1, 2]


def test_example_same_context_same_value(account_attribute):
    assert account_attribute.example("same-seed") == account_attribute.example("same-seed")


def test_example_collection_hint_is_loaded():
    attribute = Attribute(Collection.of(Integer), example=["1", "2"])
    example = attribute.example("ids")
    assert example == [1, 2]
    assert attribute.validate(example) == []


def test_example_record_hint_is_loaded():
    attribute = Attribute(_thing(), example={"id": "5"})
    example = attribute.example("thing")
    assert example["id"] == 5
    assert attribute.validate(example) == []


@pytest.mark.parametrize(
    "type_spec, hint",
    [
        (Collection.of(Integer), ["x"]),
        (Collection.of(Integer), [1, "two"]),
        (Record.builder().attribute("id", Integer).build(), {"id": "five"}),
    ],
)
def test_example_hint_that_cannot_load_raises(type_spec, hint):
    with pytest.raises(ConfigurationError) as exc_info:
        Attribute(type_spec, example=hint)
    assert exc_info.value.option == "example"


# ---------------------------------------------------------------------------
# Describe: required_if
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "requirement, expected",
    [
        ("status", "status"),
        ({"status": "active"}, {"status": "active"}),
        ({"status": re.compile("^act")}, {"status": "matches pattern '^act'"}),
        ({"count": lambda count: count > 3}, {"count": "satisfies <lambda>"}),
    ],
)
def test_describe_renders_required_if_as_data(requirement, expected):
    described = Attribute(Integer, required_if=requirement).describe()
    assert described["required_if"] == expected
