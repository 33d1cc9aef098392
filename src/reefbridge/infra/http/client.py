import httpx


class HttpClient:
    """Thin async HTTP client shared by the JSON-RPC clients."""

    def __init__(self, timeout: float = 30.0) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, headers={"Content-Type": "application/json"})

    async def post(self, url: str, json: dict | list | None = None) -> httpx.Response:
        return await self._client.post(url, json=json)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
