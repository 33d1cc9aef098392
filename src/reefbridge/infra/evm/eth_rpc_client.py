"""Execution-layer JSON-RPC client (eth-rpc)."""

import logging

from reefbridge.domain.address import normalize_evm_address
from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.http.json_rpc_client import JsonRpcClient

logger = logging.getLogger(__name__)


def _parse_quantity(value: object, method: str) -> int:
    """Decode a hex QUANTITY ("0x1bc16d674ec80000") into an int."""
    if isinstance(value, str) and value.startswith(("0x", "0X")):
        try:
            return int(value, 16) if len(value) > 2 else 0
        except ValueError:
            pass
    raise ExternalServiceError("expected hex quantity", method=method, value=value)


class EthRPCClient:
    def __init__(self, rpc: JsonRpcClient) -> None:
        self._rpc = rpc

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Raw account balance in minor units."""
        result = await self._rpc.call("eth_getBalance", [normalize_evm_address(address), block])
        return _parse_quantity(result, "eth_getBalance")

    async def call(self, to: str, data: str, block: str = "latest") -> str:
        """Read-only contract call. Returns the hex-encoded return data."""
        result = await self._rpc.call("eth_call", [{"to": normalize_evm_address(to), "data": data}, block])
        if not isinstance(result, str):
            raise ExternalServiceError("eth_call returned non-hex data", to=to, value=result)
        return result

    async def chain_id(self) -> int:
        return _parse_quantity(await self._rpc.call("eth_chainId", []), "eth_chainId")
