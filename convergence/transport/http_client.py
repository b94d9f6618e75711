import httpx

from convergence.errors import TransportError

from .models import HTTPResponse


class HTTPClient:
    """
    Thin async HTTP client returning ``HTTPResponse`` records.

    Every request is bounded by a timeout. Connection failures, timeouts
    and protocol errors are raised as ``TransportError``; any well-formed
    response, whatever its status, is returned to the caller.

    Example usage:
        async with HTTPClient(timeout=10.0) as client:
            response = await client.request("GET", "http://127.0.0.1:10018/ping")
    """

    def __init__(
        self,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )

        return self._client

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes | str | None = None,
        timeout: float | None = None,
    ) -> HTTPResponse:
        if timeout is None:
            timeout = self._timeout

        if isinstance(body, str):
            body = body.encode()

        client = self._get_client()

        try:
            response = await client.request(
                method.upper(),
                url,
                headers=headers,
                content=body,
                timeout=timeout,
            )

        except (httpx.HTTPError, OSError) as err:
            raise TransportError(f"{method.upper()} {url} failed: {err!r}", cause=err) from err

        return HTTPResponse(
            status=response.status_code,
            headers={key.lower(): value for key, value in response.headers.items()},
            body=response.content,
        )

    async def get(self, url: str, **kwargs) -> HTTPResponse:
        return await self.request("GET", url, **kwargs)

    async def put(self, url: str, **kwargs) -> HTTPResponse:
        return await self.request("PUT", url, **kwargs)

    async def post(self, url: str, **kwargs) -> HTTPResponse:
        return await self.request("POST", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> HTTPResponse:
        return await self.request("DELETE", url, **kwargs)

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

        self._client = None

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
