from convergence.operations.urls import Bucket

from ..specs.action_spec import ActionSpec


def require(action: ActionSpec, name: str):
    value = action.params.get(name)
    if value is None:
        raise ValueError(f"{action.action_type} requires {name}")

    return value


def bucket_param(action: ActionSpec) -> Bucket:
    """A bucket is a name or a ``[type, name]`` pair."""
    bucket = require(action, "bucket")
    if isinstance(bucket, (list, tuple)):
        if len(bucket) != 2:
            raise ValueError(f"{action.action_type} bucket must be [type, name]")

        return (str(bucket[0]), str(bucket[1]))

    return str(bucket)
