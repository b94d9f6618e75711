from .condition import (
    Check as Check,
    Condition as Condition,
    raise_for_transport as raise_for_transport,
    subset_condition as subset_condition,
)
