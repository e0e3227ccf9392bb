"""Shared fixtures for the AgentCraft test suite."""

import pytest

from agentcraft.catalog import load_catalog
from agentcraft.engine.models import Scenario


class ScriptedRandom:
    """Random source that replays preset values and counts draws.

    Drawing more values than were scripted fails the test, so an empty
    script asserts that no draw happens at all.
    """

    def __init__(self, values=()):
        self.values = list(values)
        self.calls = 0

    def random(self):
        assert self.values, "unexpected random draw"
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture(scope="session")
def catalog():
    """The bundled content catalog."""
    return load_catalog()


@pytest.fixture
def build(catalog):
    """Build a Configuration from component ids."""
    def _build(*ids):
        return catalog.build_configuration(ids)
    return _build


@pytest.fixture
def scenario():
    """Build a Scenario from input text and difficulty."""
    counter = iter(range(1, 1000))

    def _scenario(text, difficulty="low"):
        return Scenario(id=f"s-{next(counter):02d}", input=text, difficulty=difficulty)
    return _scenario


@pytest.fixture
def scripted():
    """Factory for a ScriptedRandom with the given draws."""
    return ScriptedRandom
