from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Endpoint:
    host: str
    port: int
    scheme: str = "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def parse(cls, value: "str | dict | list | tuple | Endpoint") -> "Endpoint":
        """Accepts ``"host:port"``, ``[host, port]`` or ``{"host", "port"}``."""
        if isinstance(value, Endpoint):
            return value

        if isinstance(value, str):
            scheme = "http"
            if "://" in value:
                scheme, value = value.split("://", 1)

            host, separator, port = value.rpartition(":")
            if not separator or not host:
                raise ValueError(f"Endpoint '{value}' must be host:port")

            return cls(host=host, port=int(port), scheme=scheme)

        if isinstance(value, dict):
            return cls(
                host=value["host"],
                port=int(value["port"]),
                scheme=value.get("scheme", "http"),
            )

        if isinstance(value, (list, tuple)) and len(value) == 2:
            host, port = value
            return cls(host=str(host), port=int(port))

        raise ValueError(f"Cannot parse endpoint from {value!r}")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"
