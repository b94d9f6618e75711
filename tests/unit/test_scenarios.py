"""
Tests for declarative scenarios: parsing, the action registry, and the
runner's timeout and failure handling.
"""

import asyncio

import pytest

from convergence.harness import Harness
from convergence.polling import PollConfig
from convergence.scenarios import (
    ActionOutcome,
    ActionRegistry,
    ActionSpec,
    ScenarioResult,
    ScenarioRunner,
    ScenarioSpec,
    build_default_registry,
)


def scenario_data(**overrides) -> dict:
    data = {
        "name": "fruit_index",
        "cluster": {
            "nodes": [
                {"name": "dev1", "http": "127.0.0.1:10018", "admin": "127.0.0.1:10019"},
                {"name": "dev2", "http": "127.0.0.1:10028", "admin": "127.0.0.1:10029"},
            ]
        },
        "poll": {"max_attempts": 3, "delay": "2s"},
        "actions": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def harness_factory(caller, sleep, quiet_env):
    def factory(spec: ScenarioSpec) -> Harness:
        return Harness.create(
            spec.cluster,
            env=quiet_env,
            caller=caller,
            poll_config=spec.poll or PollConfig(max_attempts=3, delay=0.1),
            sleep=sleep,
        )

    return factory


class TestScenarioSpec:
    """Parsing of scenario documents."""

    def test_parses_cluster_actions_and_timeouts(self):
        spec = ScenarioSpec.from_dict(
            scenario_data(
                timeouts={"default": 30, "scenario": "600", "commit": 5},
                actions=[
                    {"type": "commit", "params": {"index": "fruit"}},
                    {"type": "sleep", "params": {"seconds": "2s"}, "timeout_seconds": "10"},
                ],
            )
        )

        assert spec.cluster.nodes == ("dev1", "dev2")
        assert spec.cluster.admin("dev2").port == 10029
        assert [action.action_type for action in spec.actions] == ["commit", "sleep"]
        assert spec.actions[1].timeout_seconds == 10.0
        assert spec.default_action_timeout_seconds == 30.0
        assert spec.scenario_timeout_seconds == 600.0
        assert spec.timeouts["commit"] == 5.0

    def test_poll_delay_accepts_duration_strings(self):
        spec = ScenarioSpec.from_dict(scenario_data(poll={"max_attempts": 7, "delay": "1m30s"}))

        assert spec.poll == PollConfig(max_attempts=7, delay=90.0)

    def test_missing_name_or_cluster_is_rejected(self):
        with pytest.raises(ValueError):
            ScenarioSpec.from_dict(scenario_data(name=""))

        with pytest.raises(ValueError):
            ScenarioSpec.from_dict(scenario_data(cluster=None))

    def test_action_params_must_be_a_mapping(self):
        with pytest.raises(ValueError):
            ActionSpec.from_dict({"type": "commit", "params": ["fruit"]})

        with pytest.raises(ValueError):
            ActionSpec.from_dict({"params": {}})

    def test_from_json_reads_a_file(self, tmp_path):
        path = tmp_path / "scenario.json"
        path.write_text(
            '{"name": "from_file", "cluster": {"nodes": [{"name": "dev1", "http": "localhost:8098"}]}}'
        )

        spec = ScenarioSpec.from_json(path)

        assert spec.name == "from_file"
        assert spec.poll is None
        assert spec.actions == []


class TestActionRegistry:
    """Action lookup."""

    def test_default_registry_covers_the_wait_operations(self):
        registry = build_default_registry()

        for action_type in (
            "sleep",
            "wait_for_index",
            "wait_for_schema",
            "wait_for_bucket_type",
            "wait_for_all_trees",
            "wait_for_full_exchange_round",
            "wait_until_fuses_blown",
            "wait_until_fuses_reset",
            "write_objects",
            "commit",
            "search_expect",
            "drain_queues",
        ):
            assert action_type in registry

    def test_unknown_action_raises(self):
        with pytest.raises(ValueError, match="Unknown action type"):
            ActionRegistry().get("reboot")


class TestScenarioRunner:
    """Running scenarios against a scripted cluster."""

    @pytest.mark.asyncio
    async def test_actions_run_in_order(self, caller, sleep, harness_factory):
        caller.on("yz_solr", "ping", "ok")
        caller.on("yz_kv", "compute_tree_info", [[0, 1.0], [1, 2.0]])
        caller.on("yz_solr", "commit", "ok")
        caller.on("yz_solrq_drain_mgr", "drain", "ok")

        spec = ScenarioSpec.from_dict(
            scenario_data(
                actions=[
                    {"type": "wait_for_index", "params": {"index": "fruit"}},
                    {"type": "wait_for_all_trees", "params": {"nodes": ["dev2"]}},
                    {"type": "drain_queues"},
                    {"type": "commit", "params": {"index": "fruit", "softcommit": "3s"}},
                ]
            )
        )

        outcome = await ScenarioRunner(harness_factory=harness_factory).run(spec)

        assert outcome.result == ScenarioResult.PASSED
        assert [action.name for action in outcome.actions] == [
            "wait_for_index",
            "wait_for_all_trees",
            "drain_queues",
            "commit",
        ]
        assert [call.node for call in caller.calls_to("yz_kv", "compute_tree_info")] == ["dev2"]
        assert sleep.delays == [3.0]

    @pytest.mark.asyncio
    async def test_unknown_action_fails_the_scenario(self, harness_factory):
        spec = ScenarioSpec.from_dict(scenario_data(actions=[{"type": "reboot"}]))

        outcome = await ScenarioRunner(harness_factory=harness_factory).run(spec)

        assert outcome.result == ScenarioResult.FAILED
        assert "reboot" in outcome.error

    @pytest.mark.asyncio
    async def test_convergence_timeout_fails_the_scenario(self, caller, harness_factory):
        caller.on("yz_solr", "ping", lambda node, args: node == "dev1")

        spec = ScenarioSpec.from_dict(
            scenario_data(actions=[{"type": "wait_for_index", "params": {"index": "fruit"}}])
        )

        outcome = await ScenarioRunner(harness_factory=harness_factory).run(spec)

        assert outcome.result == ScenarioResult.FAILED
        assert "dev2" in outcome.error
        assert outcome.actions == []

    @pytest.mark.asyncio
    async def test_action_timeout_fails_the_scenario(self, harness_factory):
        async def stall(runtime, action) -> ActionOutcome:
            await asyncio.sleep(10)
            return ActionOutcome(name="stall", succeeded=True, duration_seconds=10)

        registry = ActionRegistry()
        registry.register("stall", stall)

        spec = ScenarioSpec.from_dict(
            scenario_data(actions=[{"type": "stall", "timeout_seconds": 0.05}])
        )

        outcome = await ScenarioRunner(registry=registry, harness_factory=harness_factory).run(spec)

        assert outcome.result == ScenarioResult.FAILED
        assert "timed out" in outcome.error

    @pytest.mark.asyncio
    async def test_target_nodes_must_belong_to_the_cluster(self, caller, harness_factory):
        caller.on("yz_solrq_drain_mgr", "drain", "ok")

        spec = ScenarioSpec.from_dict(
            scenario_data(actions=[{"type": "drain_queues", "params": {"nodes": ["dev9"]}}])
        )

        outcome = await ScenarioRunner(harness_factory=harness_factory).run(spec)

        assert outcome.result == ScenarioResult.FAILED
        assert "dev9" in outcome.error
        assert caller.calls_to("yz_solrq_drain_mgr", "drain") == []
