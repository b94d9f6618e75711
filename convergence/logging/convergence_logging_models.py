from .models import Entry, LogLevel


class ProbeTrace(Entry, kw_only=True):
    node: str
    probe: str
    outcome: str
    level: LogLevel = LogLevel.TRACE


class PollDebug(Entry, kw_only=True):
    node: str
    condition: str
    attempt: int
    max_attempts: int
    level: LogLevel = LogLevel.DEBUG


class PollInfo(Entry, kw_only=True):
    node: str
    condition: str
    attempt: int
    max_attempts: int
    level: LogLevel = LogLevel.INFO


class PollError(Entry, kw_only=True):
    node: str
    condition: str
    attempt: int
    max_attempts: int
    level: LogLevel = LogLevel.ERROR


class VerifierInfo(Entry, kw_only=True):
    nodes: list[str]
    condition: str
    level: LogLevel = LogLevel.INFO


class VerifierError(Entry, kw_only=True):
    nodes: list[str]
    failed_nodes: list[str]
    condition: str
    level: LogLevel = LogLevel.ERROR


class OperationDebug(Entry, kw_only=True):
    operation: str
    node: str | None = None
    level: LogLevel = LogLevel.DEBUG


class OperationInfo(Entry, kw_only=True):
    operation: str
    node: str | None = None
    level: LogLevel = LogLevel.INFO


class OperationError(Entry, kw_only=True):
    operation: str
    node: str | None = None
    level: LogLevel = LogLevel.ERROR


class SearchInfo(Entry, kw_only=True):
    index: str
    expected: int | None = None
    actual: int | None = None
    level: LogLevel = LogLevel.INFO
