"""Shared pytest fixtures for attrschema tests."""
from __future__ import annotations

import pytest

from attrschema import Attribute, Record
from tests.fixtures import build_account


@pytest.fixture(scope="session")
def account() -> Record:
    """Canonical account record shared across tests."""
    return build_account()


@pytest.fixture(scope="session")
def account_attribute(account: Record) -> Attribute:
    return Attribute(account)
