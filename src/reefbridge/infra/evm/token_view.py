"""ERC-20 view of the native asset (balanceOf through eth_call)."""

import logging

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_bytes

from reefbridge.domain.address import normalize_evm_address
from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.evm.eth_rpc_client import EthRPCClient

logger = logging.getLogger(__name__)

BALANCE_OF_SELECTOR = function_signature_to_4byte_selector("balanceOf(address)")  # 0x70a08231


def encode_balance_of(address: str) -> str:
    calldata = BALANCE_OF_SELECTOR + abi_encode(["address"], [normalize_evm_address(address)])
    return "0x" + calldata.hex()


class TokenView:
    """Read-only ERC-20 facade over a fixed contract address."""

    def __init__(self, eth: EthRPCClient, contract_address: str) -> None:
        self._eth = eth
        self._contract = normalize_evm_address(contract_address)

    @property
    def contract_address(self) -> str:
        return self._contract

    async def balance_of(self, address: str) -> int:
        raw = await self._eth.call(self._contract, encode_balance_of(address))
        try:
            (value,) = abi_decode(["uint256"], to_bytes(hexstr=raw))
        except (DecodingError, ValueError) as e:
            raise ExternalServiceError(
                "balanceOf returned undecodable data", contract=self._contract, address=address, data=raw
            ) from e
        return int(value)


def build_token_view(eth: EthRPCClient, contract_address: str) -> TokenView | None:
    """None when no token-view contract is configured."""
    if not contract_address:
        return None
    return TokenView(eth, contract_address)
