from unittest.mock import AsyncMock, MagicMock

import pytest

from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.evm.token_view import BALANCE_OF_SELECTOR, TokenView, build_token_view, encode_balance_of

CONTRACT = "0x0000000000000000000000000000000001000000"
HOLDER = "0x0000000000000000000000000000000000001234"


@pytest.fixture()
def eth():
    client = MagicMock()
    client.call = AsyncMock()
    return client


class TestEncoding:
    def test_selector(self):
        assert BALANCE_OF_SELECTOR.hex() == "70a08231"

    def test_calldata_is_selector_plus_padded_address(self):
        data = encode_balance_of(HOLDER)
        assert data == "0x70a08231" + "00" * 12 + "00" * 18 + "1234"
        assert len(data) == 2 + 8 + 64


class TestBalanceOf:
    async def test_decodes_uint256(self, eth):
        eth.call.return_value = "0x" + (5 * 10**18).to_bytes(32, "big").hex()
        view = TokenView(eth, CONTRACT)

        assert await view.balance_of(HOLDER) == 5 * 10**18
        to, data = eth.call.call_args[0]
        assert to == CONTRACT
        assert data == encode_balance_of(HOLDER)

    async def test_empty_return_data(self, eth):
        # precompile not deployed: eth_call returns "0x"
        eth.call.return_value = "0x"
        view = TokenView(eth, CONTRACT)

        with pytest.raises(ExternalServiceError):
            await view.balance_of(HOLDER)

    async def test_rpc_error_propagates(self, eth):
        eth.call.side_effect = ExternalServiceError("RPC error: execution reverted")
        view = TokenView(eth, CONTRACT)

        with pytest.raises(ExternalServiceError, match="reverted"):
            await view.balance_of(HOLDER)


class TestBuildTokenView:
    def test_disabled_without_address(self, eth):
        assert build_token_view(eth, "") is None

    def test_builds_view(self, eth):
        view = build_token_view(eth, CONTRACT.lower())
        assert view is not None
        assert view.contract_address == CONTRACT
