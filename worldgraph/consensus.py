"""Generation strategies run against the completion oracle.

``SingleStrategy`` asks once and trusts the answer. ``SampledStrategy`` asks
several times in parallel and keeps the most frequent answer.
"""

import concurrent.futures
import logging
from collections import Counter
from typing import Callable, Iterable, List, Optional

from worldgraph.errors import OracleError
from worldgraph.llm_utils import process_result

logger = logging.getLogger(__name__)

UNDEFINED = "undefined"

Complete = Callable[[str], str]


def majority_vote(responses: Iterable[str]) -> Optional[str]:
    """Return the most frequent response, or ``None`` for an empty pool.

    Ties go to the value seen first in ``responses``.
    """
    counts = Counter(responses)
    if not counts:
        return None
    # Counter keeps first-seen order; most_common(1) is max(), which returns
    # the first of equal counts.
    return counts.most_common(1)[0][0]


class SingleStrategy:
    """One completion call; failures propagate."""

    def run(self, complete: Complete, prompt: str) -> str:
        return process_result(complete(prompt))

    def __repr__(self) -> str:
        return "SingleStrategy()"


class SampledStrategy:
    """Parallel sampling reduced by majority vote.

    NOTE: dispatches ``samples - 1`` calls, not ``samples``. This reproduces
    the deployed service's behaviour and is kept so existing stores and
    configurations behave the same.
    """

    def __init__(self, samples: int = 3):
        if samples < 1:
            raise ValueError(f"samples must be at least 1 (received {samples}).")
        self.samples = samples

    @property
    def calls(self) -> int:
        return self.samples - 1

    def collect(self, complete: Complete, prompt: str) -> List[str]:
        """Run every call to completion and return the successful, trimmed responses.

        Results keep dispatch order so the vote's tie-break is reproducible.
        A failed call only shrinks the pool; siblings are never cancelled.
        """
        if self.calls == 0:
            return []

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.calls) as executor:
            futures = [executor.submit(complete, prompt) for _ in range(self.calls)]
            concurrent.futures.wait(futures, return_when=concurrent.futures.ALL_COMPLETED)

        responses: List[str] = []
        for idx, future in enumerate(futures):
            try:
                responses.append(process_result(future.result()))
            except OracleError as exc:
                logger.warning("Sample %d/%d failed: %s", idx + 1, self.calls, exc)
        return responses

    def run(self, complete: Complete, prompt: str) -> str:
        winner = majority_vote(self.collect(complete, prompt))
        if winner is None:
            logger.error("Empty samples!")
            return UNDEFINED
        return winner

    def __repr__(self) -> str:
        return f"SampledStrategy(samples={self.samples})"


def build_strategy(name: str, samples: int = 3):
    """Map a configured strategy name to a strategy instance."""
    normalized = (name or "").strip().lower()
    if normalized in {"simple", "single"}:
        return SingleStrategy()
    if normalized in {"sample", "sampled"}:
        return SampledStrategy(samples)
    raise ValueError(f"Unknown strategy: {name!r}. Expected 'simple' or 'sample'.")
