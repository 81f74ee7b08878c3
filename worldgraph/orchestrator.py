"""Cache-or-generate pipeline.

``WorldGraph.resolve`` answers ``a + b``: it looks the canonical pair up in the
store and returns the stored fact on a hit. On a miss it builds few-shot
context from related facts, compiles the prompt, runs the configured
generation strategy against the oracle, persists the answer and returns it.
"""

import logging
from typing import List

from worldgraph.context import build_context
from worldgraph.errors import NotFoundError, StoreError
from worldgraph.models import Pair, Triple, canonicalize
from worldgraph.prompts import compile_prompt

logger = logging.getLogger(__name__)


class WorldGraph:
    """Ties the store, the oracle and the generation strategy together.

    Holds no state of its own beyond references to its collaborators; every
    lookup goes to the store.
    """

    def __init__(self, store, oracle, strategy):
        self.store = store
        self.oracle = oracle
        self.strategy = strategy

    def resolve(self, a: str, b: str) -> Triple:
        pair = canonicalize(a, b)
        try:
            return self.store.get(pair.a, pair.b)
        except NotFoundError:
            pass
        except StoreError as exc:
            logger.warning("Lookup failed for %s + %s, generating: %s", pair.a, pair.b, exc)
        return self.conjure(pair)

    def conjure(self, pair: Pair) -> Triple:
        """Generate, persist and return a fresh answer for a canonical pair."""
        examples = build_context(self.store, pair)
        prompt = compile_prompt(pair.a, pair.b, examples)

        c = self.strategy.run(self.oracle.complete, prompt)

        self.store.insert(pair.a, pair.b, c)
        return Triple(a=pair.a, b=pair.b, c=c)

    def explore(self) -> List[Triple]:
        return self.store.list_all()
