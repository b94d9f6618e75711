"""
Tests for the cluster convergence verifier.

Covers:
- Success only when every node converges
- Independent per-node budgets
- Failure attribution to the first failing node in cluster order
- Single node, list and cluster targets
- A defect on one node stops the other pollers
"""

import asyncio

import pytest

from convergence.conditions import Condition
from convergence.errors import ConvergenceTimeout
from convergence.polling import PollConfig
from convergence.verification import ConvergenceVerifier

from tests.unit.mocks import RecordingSleep, make_cluster


def per_node_condition(succeed_on: dict[str, int | None]):
    evaluations: dict[str, int] = {node: 0 for node in succeed_on}

    async def check(node: str) -> bool:
        evaluations[node] += 1
        threshold = succeed_on[node]
        return threshold is not None and evaluations[node] >= threshold

    return Condition("per node", check), evaluations


class TestWaitUntil:
    """ConvergenceVerifier.wait_until."""

    @pytest.mark.asyncio
    async def test_all_nodes_converge(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=5, delay=1.0), sleep=RecordingSleep())
        condition, evaluations = per_node_condition({"dev1": 1, "dev2": 3, "dev3": 2})

        outcomes = await verifier.wait_until(make_cluster("dev1", "dev2", "dev3"), condition)

        assert [outcome.node for outcome in outcomes] == ["dev1", "dev2", "dev3"]
        assert [outcome.attempts for outcome in outcomes] == [1, 3, 2]
        assert evaluations == {"dev1": 1, "dev2": 3, "dev3": 2}

    @pytest.mark.asyncio
    async def test_slow_node_does_not_consume_other_budgets(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=4, delay=1.0), sleep=RecordingSleep())
        condition, evaluations = per_node_condition({"dev1": 4, "dev2": 4})

        outcomes = await verifier.wait_until(["dev1", "dev2"], condition)

        assert all(outcome.converged for outcome in outcomes)
        assert evaluations == {"dev1": 4, "dev2": 4}

    @pytest.mark.asyncio
    async def test_failure_attributed_to_first_failing_node(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=3, delay=1.0), sleep=RecordingSleep())
        condition, evaluations = per_node_condition({"dev1": 1, "dev2": None, "dev3": None})

        with pytest.raises(ConvergenceTimeout) as error:
            await verifier.wait_until(make_cluster("dev1", "dev2", "dev3"), condition)

        assert error.value.node == "dev2"
        assert error.value.failed_nodes == ["dev2", "dev3"]
        assert error.value.attempts == 3
        assert evaluations["dev2"] == 3
        assert evaluations["dev3"] == 3

    @pytest.mark.asyncio
    async def test_single_node_target(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=2, delay=1.0), sleep=RecordingSleep())
        condition, evaluations = per_node_condition({"dev1": 1})

        outcomes = await verifier.wait_until("dev1", condition)

        assert len(outcomes) == 1
        assert evaluations == {"dev1": 1}

    @pytest.mark.asyncio
    async def test_plain_check_is_wrapped(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=1, delay=1.0), sleep=RecordingSleep())

        async def never(node: str) -> bool:
            return False

        with pytest.raises(ConvergenceTimeout) as error:
            await verifier.wait_until("dev1", never, description="never holds")

        assert error.value.description == "never holds"

    @pytest.mark.asyncio
    async def test_duplicate_nodes_rejected(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=1, delay=1.0), sleep=RecordingSleep())
        condition, _ = per_node_condition({"dev1": 1})

        with pytest.raises(ValueError):
            await verifier.wait_until(["dev1", "dev1"], condition)

    @pytest.mark.asyncio
    async def test_defect_on_one_node_stops_other_pollers(self):
        verifier = ConvergenceVerifier(PollConfig(max_attempts=50, delay=0.01))
        evaluations = {"dev1": 0, "dev2": 0}

        async def check(node: str) -> bool:
            evaluations[node] += 1
            if node == "dev1":
                await asyncio.sleep(0.02)
                raise ValueError("unexpected reply shape")

            return False

        with pytest.raises(ValueError):
            await verifier.wait_until(["dev1", "dev2"], Condition("broken on dev1", check))

        stopped_at = evaluations["dev2"]
        await asyncio.sleep(0.1)

        assert evaluations["dev2"] == stopped_at
        assert evaluations["dev1"] == 1

    def test_with_config_keeps_sleep(self):
        sleep = RecordingSleep()
        verifier = ConvergenceVerifier(PollConfig(max_attempts=1, delay=1.0), sleep=sleep)

        other = verifier.with_config(PollConfig(max_attempts=9, delay=2.0))

        assert other.config.max_attempts == 9
        assert other.sleep is sleep
        assert other.logger is verifier.logger
