from .errors import (
    AssertionMismatch as AssertionMismatch,
    ConvergenceError as ConvergenceError,
    ConvergenceTimeout as ConvergenceTimeout,
    OperationFailed as OperationFailed,
    RemoteCallError as RemoteCallError,
    TransportError as TransportError,
)
