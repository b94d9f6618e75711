from typing import Any

import msgspec


class HTTPResponse(msgspec.Struct, kw_only=True):
    status: int
    headers: dict[str, str] = msgspec.field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class RemoteCallRequest(msgspec.Struct, kw_only=True):
    module: str
    function: str
    args: list[Any] = msgspec.field(default_factory=list)


class RemoteCallReply(msgspec.Struct, kw_only=True):
    result: Any = None
    error: Any = None
