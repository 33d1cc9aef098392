"""BridgeService: orchestrates mapping → snapshot → signature → transfer → snapshot → reconcile."""

import logging

from reefbridge.bridge.account_mapper import AccountMapper
from reefbridge.bridge.events import EventSink
from reefbridge.bridge.executor import TransferExecutor
from reefbridge.bridge.inspector import MetadataInspector
from reefbridge.bridge.oracle import BalanceOracle
from reefbridge.bridge.reconciler import ReconciliationReporter
from reefbridge.domain.address import normalize_evm_address
from reefbridge.domain.enums import Anomaly, MappingStrategy, Stage
from reefbridge.domain.models import Account, BridgeRunReport, MappingSummary, NativeBalance, TransferRequest
from reefbridge.domain.units import MAX_UINT256
from reefbridge.exceptions import InvalidAmountError, MappingMissingError
from reefbridge.infra.native.base import NativeLedgerClient

logger = logging.getLogger(__name__)

NOT_BRIDGING = "not a bridging call"


class BridgeService:
    """One transfer at a time. Each stage runs strictly after the previous one."""

    def __init__(
        self,
        ledger: NativeLedgerClient,
        inspector: MetadataInspector,
        mapper: AccountMapper,
        executor: TransferExecutor,
        oracle: BalanceOracle,
        reporter: ReconciliationReporter,
        events: EventSink,
    ) -> None:
        self._ledger = ledger
        self._inspector = inspector
        self._mapper = mapper
        self._executor = executor
        self._oracle = oracle
        self._reporter = reporter
        self._events = events
        self._chain: str | None = None

    def signer_account(self) -> Account:
        return Account(native_address=self._ledger.signer_address, public_key=self._ledger.signer_public_key)

    async def chain(self) -> str:
        if self._chain is None:
            self._chain = await self._ledger.chain_name()
            self._events.info(Stage.SESSION, f"connected to chain: {self._chain}")
        return self._chain

    async def bridge(
        self,
        account: Account,
        amount_minor_units: int,
        target: str | None = None,
        strategy: MappingStrategy | None = None,
    ) -> BridgeRunReport:
        """Move ``amount_minor_units`` from the native ledger to ``target``.

        ``target`` defaults to the account's own execution address.
        The target and amount are validated before anything is submitted.
        """
        chain = await self.chain()
        target_address = normalize_evm_address(target) if target else None
        if not 0 <= amount_minor_units <= MAX_UINT256:
            raise InvalidAmountError("amount must fit in uint256", amount=amount_minor_units)

        try:
            account = await self._mapper.ensure_mapped(account, strategy)
        except MappingMissingError as e:
            self._events.error(Stage.MAPPING, "no execution address; transfer aborted", error=str(e))
            return BridgeRunReport(chain=chain, account=account, error=str(e),
                                   mapping_anomaly=Anomaly.MAPPING_MISSING)

        target_address = target_address or account.execution_address
        request = TransferRequest(
            source=account,
            target_execution_address=target_address,
            amount_minor_units=amount_minor_units,
        )

        before = await self._oracle.snapshot(account.native_address, request.target_execution_address)
        signature = await self._inspector.signature()

        if not signature.is_bridging:
            self._events.warning(
                Stage.TRANSFER, f"transfer call looks like a native AccountId transfer; {NOT_BRIDGING}",
                names=list(signature.arg_names),
            )
            return BridgeRunReport(chain=chain, account=account, request=request, signature=signature,
                                   skip_reason=NOT_BRIDGING)

        outcome = await self._executor.execute(request, signature)
        after = await self._oracle.snapshot(account.native_address, request.target_execution_address)
        result = self._reporter.reconcile(before, after, outcome=outcome, signature=signature)

        return BridgeRunReport(
            chain=chain,
            account=account,
            request=request,
            signature=signature,
            outcome=outcome,
            reconciliation=result,
            error=outcome.error,
        )

    async def mapping_summary(self, account: Account, strategy: MappingStrategy | None = None) -> MappingSummary:
        """Map (if needed) and report both addresses, balances and the reverse mapping."""
        chain = await self.chain()
        account = await self._mapper.ensure_mapped(account, strategy)

        index = await self._ledger.account_next_index(account.native_address)
        snapshot = await self._oracle.snapshot(account.native_address, account.execution_address)
        reverse = await self._mapper.reverse_lookup(account.execution_address)

        return MappingSummary(
            chain=chain,
            account=account,
            account_index=index,
            native=NativeBalance(free=snapshot.native_free, reserved=snapshot.native_reserved),
            execution_raw_balance=snapshot.execution_raw_balance,
            execution_token_balance=snapshot.execution_token_balance,
            token_error=snapshot.token_error,
            reverse_mapping=reverse,
        )
