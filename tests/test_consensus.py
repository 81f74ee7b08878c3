import threading
import time

import pytest

from worldgraph.consensus import (
    UNDEFINED,
    SampledStrategy,
    SingleStrategy,
    build_strategy,
    majority_vote,
)
from worldgraph.errors import OracleError

from conftest import FakeOracle


def test_majority_vote_picks_most_frequent():
    assert majority_vote(["Mud", "Steam", "Steam"]) == "Steam"


def test_majority_vote_tie_goes_to_first_seen():
    assert majority_vote(["Mud", "Steam"]) == "Mud"
    assert majority_vote(["Steam", "Mud", "Mud", "Steam"]) == "Steam"


def test_majority_vote_empty_pool():
    assert majority_vote([]) is None


def test_single_strategy_trims_response():
    oracle = FakeOracle(["  Steam \n"])

    assert SingleStrategy().run(oracle.complete, "prompt") == "Steam"
    assert oracle.prompts == ["prompt"]


def test_single_strategy_propagates_oracle_failure():
    oracle = FakeOracle([OracleError("timeout")])

    with pytest.raises(OracleError):
        SingleStrategy().run(oracle.complete, "prompt")


def test_sampled_strategy_issues_one_fewer_call_than_configured():
    oracle = FakeOracle(default="Steam")

    SampledStrategy(samples=3).run(oracle.complete, "prompt")

    assert oracle.calls == 2


def test_sampled_strategy_calls_run_concurrently():
    # Both calls must be in flight at once for the barrier to release.
    barrier = threading.Barrier(2, timeout=5)

    def complete(prompt):
        barrier.wait()
        return "Steam"

    assert SampledStrategy(samples=3).run(complete, "prompt") == "Steam"


def test_sampled_strategy_votes_on_trimmed_responses():
    oracle = FakeOracle([" Mud", "Steam ", "Steam\n", "Mud"])

    assert SampledStrategy(samples=4).run(oracle.complete, "prompt") == "Steam"
    assert oracle.calls == 3


def test_sampled_strategy_ignores_failed_calls():
    oracle = FakeOracle([OracleError("boom"), "Steam", OracleError("boom")])

    assert SampledStrategy(samples=4).run(oracle.complete, "prompt") == "Steam"
    assert oracle.calls == 3


def test_sampled_strategy_waits_for_slow_calls():
    lock = threading.Lock()
    started = []

    def complete(prompt):
        with lock:
            started.append(prompt)
            slow = len(started) == 1
        if slow:
            time.sleep(0.2)
            return "Geyser"
        return "Mud"

    responses = SampledStrategy(samples=3).collect(complete, "prompt")

    assert sorted(responses) == ["Geyser", "Mud"]


def test_sampled_strategy_all_failures_yield_undefined():
    oracle = FakeOracle(default=OracleError("down"))

    assert SampledStrategy(samples=3).run(oracle.complete, "prompt") == UNDEFINED
    assert oracle.calls == 2


def test_sampled_strategy_with_one_sample_makes_no_calls():
    oracle = FakeOracle()

    assert SampledStrategy(samples=1).run(oracle.complete, "prompt") == UNDEFINED
    assert oracle.calls == 0


def test_sampled_strategy_rejects_non_positive_samples():
    with pytest.raises(ValueError):
        SampledStrategy(samples=0)


@pytest.mark.parametrize(
    "name,expected",
    [("simple", SingleStrategy), ("Single", SingleStrategy), ("sample", SampledStrategy), ("SAMPLED", SampledStrategy)],
)
def test_build_strategy(name, expected):
    assert isinstance(build_strategy(name, 5), expected)


def test_build_strategy_passes_sample_count():
    assert build_strategy("sample", 5).samples == 5


def test_build_strategy_unknown_name():
    with pytest.raises(ValueError):
        build_strategy("beam")
