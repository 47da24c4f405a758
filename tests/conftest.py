"""Shared pytest fixtures for structclass tests."""

import pytest

from structclass.checkers import reset_checker
from structclass.config import SETTINGS_ENV_VARIABLE, settings

from tests.structs import Address, Person


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch):
    """Start every test with default settings and no registered checker."""
    monkeypatch.delenv(SETTINGS_ENV_VARIABLE, raising=False)
    settings.reset()
    reset_checker()
    try:
        yield
    finally:
        settings.reset()
        reset_checker()


@pytest.fixture
def address() -> Address:
    """A valid address."""
    return Address(street="1 Main Street", city="Springfield")


@pytest.fixture
def person(address: Address) -> Person:
    """A valid person with a valid address and no friends."""
    return Person(name="Ada", age=36, address=address)
