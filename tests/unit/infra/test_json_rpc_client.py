"""Tests for JsonRpcClient: envelope handling and retry policy."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from reefbridge.exceptions import ExternalServiceError, NetworkError
from reefbridge.infra.http.json_rpc_client import JsonRpcClient

URL = "http://localhost:8545"


@pytest.fixture()
def mock_http():
    return AsyncMock()


@pytest.fixture()
def rpc(mock_http):
    return JsonRpcClient(url=URL, http_client=mock_http)


def _mock_response(data):
    resp = MagicMock()
    resp.json.return_value = data
    resp.status_code = 200
    return resp


class TestEnvelope:
    async def test_returns_result(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": "0x10"})

        assert await rpc.call("eth_getBalance", ["0xabc", "latest"]) == "0x10"

    async def test_payload_shape(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": None})

        await rpc.call("eth_chainId")
        payload = mock_http.post.call_args[1]["json"]
        assert payload["jsonrpc"] == "2.0"
        assert payload["method"] == "eth_chainId"
        assert payload["params"] == []
        assert mock_http.post.call_args[0][0] == URL

    async def test_ids_increment(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": 1})

        await rpc.call("a")
        await rpc.call("b")
        ids = [c[1]["json"]["id"] for c in mock_http.post.call_args_list]
        assert ids == [1, 2]

    async def test_null_result_is_returned(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1, "result": None})

        assert await rpc.call("eth_getTransactionByHash", ["0x1"]) is None


class TestErrors:
    async def test_error_envelope(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response(
            {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "header not found"}}
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await rpc.call("eth_getBalance", ["0xabc", "latest"])
        assert "header not found" in str(exc_info.value)
        assert exc_info.value.context["code"] == -32000
        assert exc_info.value.context["method"] == "eth_getBalance"

    async def test_transport_failure(self, rpc, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(NetworkError):
            await rpc.call("eth_chainId")

    async def test_non_json_body(self, rpc, mock_http):
        resp = MagicMock()
        resp.json.side_effect = ValueError("Expecting value")
        resp.status_code = 502
        mock_http.post.return_value = resp

        with pytest.raises(ExternalServiceError, match="not JSON"):
            await rpc.call("eth_chainId")

    async def test_missing_result(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response({"jsonrpc": "2.0", "id": 1})

        with pytest.raises(ExternalServiceError, match="no result"):
            await rpc.call("eth_chainId")

    async def test_non_dict_envelope(self, rpc, mock_http):
        mock_http.post.return_value = _mock_response(["batch"])

        with pytest.raises(ExternalServiceError, match="malformed"):
            await rpc.call("eth_chainId")


class TestRetryPolicy:
    async def test_no_retry_by_default(self, rpc, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("down")

        with pytest.raises(ExternalServiceError):
            await rpc.call("eth_chainId")
        assert mock_http.post.call_count == 1

    async def test_retries_when_enabled(self, mock_http):
        rpc = JsonRpcClient(url=URL, http_client=mock_http, max_attempts=2)
        mock_http.post.side_effect = [
            httpx.ConnectError("down"),
            _mock_response({"jsonrpc": "2.0", "id": 2, "result": "0x1"}),
        ]

        assert await rpc.call("eth_chainId") == "0x1"
        assert mock_http.post.call_count == 2
