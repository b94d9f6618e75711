from .exchange import (
    ExchangeRecord as ExchangeRecord,
    RepairStats as RepairStats,
    TreeRecord as TreeRecord,
    exchange_round_condition as exchange_round_condition,
    records_waiting_since as records_waiting_since,
    trees_built_condition as trees_built_condition,
)
from .fuses import (
    FuseState as FuseState,
    IndexQueueStatus as IndexQueueStatus,
    QueueWorkerStatus as QueueWorkerStatus,
    fuse_condition as fuse_condition,
    matches_fuse_state as matches_fuse_state,
)
from .verifier import ConvergenceVerifier as ConvergenceVerifier
