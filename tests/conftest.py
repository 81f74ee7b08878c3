import threading

import pytest

from worldgraph.consensus import SingleStrategy
from worldgraph.database import TripleStore
from worldgraph.orchestrator import WorldGraph


class FakeOracle:
    """Scripted completion oracle.

    Each outcome is either a string (returned) or an exception (raised). When
    the script runs out, ``default`` is returned.
    """

    def __init__(self, outcomes=None, default="Steam"):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.prompts = []
        self._lock = threading.Lock()

    @property
    def calls(self):
        return len(self.prompts)

    def complete(self, prompt):
        with self._lock:
            self.prompts.append(prompt)
            outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        pass


@pytest.fixture
def store():
    triple_store = TripleStore(":memory:")
    try:
        yield triple_store
    finally:
        triple_store.close()


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest.fixture
def graph(store, oracle):
    return WorldGraph(store, oracle, SingleStrategy())

