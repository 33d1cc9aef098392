"""JSON-RPC 2.0 over HTTP."""

import itertools
import logging
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.http.client import HttpClient

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """Envelope handling for a single JSON-RPC endpoint.

    ``max_attempts=1`` disables retries; anything above retries transport
    failures and error envelopes with exponential backoff.
    """

    def __init__(self, url: str, http_client: HttpClient, max_attempts: int = 1) -> None:
        self._url = url
        self._http = http_client
        self._max_attempts = max(1, max_attempts)
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    async def call(self, method: str, params: list | None = None) -> Any:
        """Execute a JSON-RPC call and return the result field."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(ExternalServiceError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        ):
            with attempt:
                return await self._call_once(method, params or [])

    async def _call_once(self, method: str, params: list) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        try:
            resp = await self._http.post(self._url, json=payload)
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                f"transport failure: {e}", method=method, url=self._url
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise ExternalServiceError(
                "response is not JSON", method=method, url=self._url, status=resp.status_code
            ) from e

        if not isinstance(data, dict):
            raise ExternalServiceError("malformed JSON-RPC envelope", method=method, url=self._url)

        if data.get("error") is not None:
            error = data["error"]
            msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            raise ExternalServiceError(f"RPC error: {msg}", method=method, url=self._url, code=code)

        if "result" not in data:
            raise ExternalServiceError("JSON-RPC envelope has no result", method=method, url=self._url)

        logger.debug("%s %s -> %r", self._url, method, data["result"])
        return data["result"]
