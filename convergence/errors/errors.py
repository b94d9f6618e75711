"""
Exceptions raised by the convergence harness.

Transport faults are absorbed by the poller while a convergence budget
remains. Only budget exhaustion and explicit value mismatches are meant
to reach a calling test, and both subclass AssertionError so pytest
reports them as test failures rather than errors.
"""

from __future__ import annotations

from typing import Any, Sequence


class ConvergenceError(Exception):
    """Base class for all harness errors."""

    pass


class TransportError(ConvergenceError):
    """
    Raised when a collaborator cannot be reached or returns a response
    that cannot be decoded.

    Never a convergence signal on its own: the poller treats it as
    "not yet" and retries within the attempt budget.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class RemoteCallError(TransportError):
    """Raised when an administrative RPC fails on the remote side (badrpc)."""

    def __init__(
        self,
        node: str,
        module: str,
        function: str,
        reason: Any,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            f"RPC {module}:{function} failed on {node}: {reason}",
            cause=cause,
        )
        self.node = node
        self.module = module
        self.function = function
        self.reason = reason


class ConvergenceTimeout(ConvergenceError, AssertionError):
    """
    Raised when a condition did not hold within its attempt budget.

    ``node`` is the node the failure is attributed to. For a cluster-wide
    wait it is the first node, in cluster order, that timed out, and
    ``failed_nodes`` lists all of them.
    """

    def __init__(
        self,
        node: str,
        description: str,
        attempts: int,
        failed_nodes: Sequence[str] | None = None,
        last_error: BaseException | None = None,
    ) -> None:
        self.node = node
        self.description = description
        self.attempts = attempts
        self.failed_nodes = list(failed_nodes) if failed_nodes else [node]
        self.last_error = last_error

        message = (
            f"Condition '{description}' did not converge on node {node} "
            f"after {attempts} attempts"
        )
        if len(self.failed_nodes) > 1:
            message += f" (failed nodes: {', '.join(self.failed_nodes)})"

        if last_error is not None:
            message += f" (last transport error: {last_error})"

        super().__init__(message)


class AssertionMismatch(ConvergenceError, AssertionError):
    """Raised when an observed value differs from the expected one."""

    def __init__(self, label: str, expected: Any, actual: Any) -> None:
        super().__init__(f"Expected {label} {expected!r}, got {actual!r}")
        self.label = label
        self.expected = expected
        self.actual = actual


class OperationFailed(ConvergenceError, AssertionError):
    """Raised when a one-shot cluster operation returns an unexpected result."""

    pass
