from .aae import (
    clear_aae_trees as clear_aae_trees,
    clear_kv_trees as clear_kv_trees,
    expire_aae_trees as expire_aae_trees,
    expire_kv_trees as expire_kv_trees,
    set_aae_mode as set_aae_mode,
    wait_for_all_trees as wait_for_all_trees,
    wait_for_full_exchange_round as wait_for_full_exchange_round,
)
from .counters import (
    CallSignature as CallSignature,
    count_calls as count_calls,
    get_call_count as get_call_count,
)
from .data import (
    commit as commit,
    drain_queues as drain_queues,
    generate_keys as generate_keys,
    http_put as http_put,
    random_binary as random_binary,
    random_keys as random_keys,
    select_random as select_random,
    write_objects as write_objects,
)
from .index import (
    create_bucket_type as create_bucket_type,
    create_index as create_index,
    create_index_http as create_index_http,
    create_indexed_bucket as create_indexed_bucket,
    create_indexed_bucket_type as create_indexed_bucket_type,
    remove_index as remove_index,
    set_bucket_index as set_bucket_index,
    set_bucket_type_index as set_bucket_type_index,
    wait_for_bucket_type as wait_for_bucket_type,
    wait_for_index as wait_for_index,
    wait_until_bucket_type_status as wait_until_bucket_type_status,
)
from .schema import (
    store_schema as store_schema,
    wait_for_schema as wait_for_schema,
)
from .search import (
    assert_search_count as assert_search_count,
    get_count as get_count,
    search as search,
    search_count_condition as search_count_condition,
    search_expect as search_expect,
    search_expect_shards as search_expect_shards,
    verify_count as verify_count,
    wait_for_search_count as wait_for_search_count,
)
from .solrq import (
    queue_status_probe as queue_status_probe,
    read_queue_status as read_queue_status,
    set_hwm as set_hwm,
    set_index_batching as set_index_batching,
    set_purge_strategy as set_purge_strategy,
    wait_until_fuses_blown as wait_until_fuses_blown,
    wait_until_fuses_reset as wait_until_fuses_reset,
)
