from .action_registry import ActionRegistry
from .aae_actions import run_wait_for_all_trees as wait_for_all_trees
from .aae_actions import run_wait_for_full_exchange_round as wait_for_full_exchange_round
from .commit import run as commit
from .drain_queues import run as drain_queues
from .fuse_actions import run_wait_until_fuses_blown as wait_until_fuses_blown
from .fuse_actions import run_wait_until_fuses_reset as wait_until_fuses_reset
from .search_expect import run as search_expect
from .sleep_action import run as sleep_action
from .wait_for_bucket_type import run as wait_for_bucket_type
from .wait_for_index import run as wait_for_index
from .wait_for_schema import run as wait_for_schema
from .write_objects import run as write_objects


def build_default_registry() -> ActionRegistry:
    registry = ActionRegistry()
    registry.register("sleep", sleep_action)
    registry.register("wait_for_index", wait_for_index)
    registry.register("wait_for_schema", wait_for_schema)
    registry.register("wait_for_bucket_type", wait_for_bucket_type)
    registry.register("wait_for_all_trees", wait_for_all_trees)
    registry.register("wait_for_full_exchange_round", wait_for_full_exchange_round)
    registry.register("wait_until_fuses_blown", wait_until_fuses_blown)
    registry.register("wait_until_fuses_reset", wait_until_fuses_reset)
    registry.register("write_objects", write_objects)
    registry.register("commit", commit)
    registry.register("search_expect", search_expect)
    registry.register("drain_queues", drain_queues)
    return registry
