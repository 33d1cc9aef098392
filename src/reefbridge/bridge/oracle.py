"""Balance oracle: before/after snapshots across both ledgers."""

import itertools
import logging

from reefbridge.bridge.events import EventSink
from reefbridge.domain.enums import Stage
from reefbridge.domain.models import BalanceSnapshot
from reefbridge.exceptions import ExternalServiceError, SnapshotError
from reefbridge.infra.evm.eth_rpc_client import EthRPCClient
from reefbridge.infra.evm.token_view import TokenView
from reefbridge.infra.native.base import NativeLedgerClient

logger = logging.getLogger(__name__)


class BalanceOracle:
    """Native free balance + raw execution balance are mandatory; the token view is best-effort."""

    def __init__(
        self,
        ledger: NativeLedgerClient,
        eth: EthRPCClient,
        events: EventSink,
        token_view: TokenView | None = None,
    ) -> None:
        self._ledger = ledger
        self._eth = eth
        self._token_view = token_view
        self._events = events
        self._clock = itertools.count(1)

    async def snapshot(self, native_address: str, execution_address: str) -> BalanceSnapshot:
        try:
            native = await self._ledger.account_balance(native_address)
        except ExternalServiceError as e:
            raise SnapshotError(
                f"native balance read failed: {e.message}", native=native_address
            ) from e

        try:
            raw = await self._eth.get_balance(execution_address)
        except ExternalServiceError as e:
            raise SnapshotError(
                f"execution balance read failed: {e.message}", execution=execution_address
            ) from e

        token_balance, token_error = await self._token_balance(execution_address)
        snapshot = BalanceSnapshot(
            native_free=native.free,
            native_reserved=native.reserved,
            execution_raw_balance=raw,
            execution_token_balance=token_balance,
            token_error=token_error,
            taken_at=next(self._clock),
        )
        self._events.info(
            Stage.SNAPSHOT, "balances read",
            native=native_address, execution=execution_address, taken_at=snapshot.taken_at,
            native_free=snapshot.native_free, execution_raw=snapshot.execution_raw_balance,
            execution_token=snapshot.execution_token_balance,
        )
        return snapshot

    async def _token_balance(self, execution_address: str) -> tuple[int | None, str | None]:
        if self._token_view is None:
            return None, None
        try:
            return await self._token_view.balance_of(execution_address), None
        except ExternalServiceError as e:
            self._events.warning(
                Stage.SNAPSHOT, "token view read failed",
                contract=self._token_view.contract_address, execution=execution_address, error=str(e),
            )
            return None, str(e)
