"""Test fixtures: sample record schemas and documents."""

from __future__ import annotations

from typing import Any

from attrschema import Collection, DateTime, Integer, Record, String


def build_address() -> Record:
    """An address record with a required street and a five-digit zip."""
    return (
        Record.builder("Address")
        .attribute("street", String, required=True)
        .attribute("zip", String, regexp=r"^\d{5}$")
        .build()
    )


def build_account() -> Record:
    """The canonical account record used across the tests.

    ``manager`` is required while the account is active and ``closed_at``
    once it is inactive.
    """
    return (
        Record.builder("Account", description="A customer account")
        .attribute("name", String, required=True)
        .attribute("status", String, values=["active", "inactive"])
        .attribute("manager", String, required_if={"status": "active"})
        .attribute("closed_at", DateTime, required_if={"status": "inactive"})
        .attribute("age", Integer, min=0, max=150)
        .attribute("address", build_address())
        .attribute("tags", Collection.of(String))
        .build()
    )


def account_document(**overrides: Any) -> dict[str, Any]:
    """Return a valid raw account document, with ``overrides`` applied."""
    document: dict[str, Any] = {
        "name": "Ada",
        "status": "active",
        "manager": "Grace",
        "age": "36",
        "address": {"street": "1 Analytical Way", "zip": "12345"},
        "tags": ["founder", "math"],
    }
    document.update(overrides)
    return {key: value for key, value in document.items() if value is not None}
