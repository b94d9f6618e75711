from .cluster import (
    Cluster as Cluster,
    Endpoint as Endpoint,
    NodeInterfaces as NodeInterfaces,
)
from .conditions import Condition as Condition
from .errors import (
    AssertionMismatch as AssertionMismatch,
    ConvergenceError as ConvergenceError,
    ConvergenceTimeout as ConvergenceTimeout,
    OperationFailed as OperationFailed,
    TransportError as TransportError,
)
from .harness import Harness as Harness
from .polling import PollConfig as PollConfig, Poller as Poller
from .verification import ConvergenceVerifier as ConvergenceVerifier
