"""Aggregated results handed to the reporting layer."""

from pydantic import BaseModel

from reefbridge.domain.enums import Anomaly
from reefbridge.domain.models.account import Account
from reefbridge.domain.models.balance import NativeBalance, ReconciliationResult
from reefbridge.domain.models.signature import CallSignature
from reefbridge.domain.models.transfer import TransferOutcome, TransferRequest


class BridgeRunReport(BaseModel):
    chain: str
    account: Account
    request: TransferRequest | None = None
    signature: CallSignature | None = None
    outcome: TransferOutcome | None = None
    reconciliation: ReconciliationResult | None = None
    skip_reason: str | None = None
    error: str | None = None
    mapping_anomaly: Anomaly | None = None

    @property
    def anomaly(self) -> Anomaly | None:
        if self.mapping_anomaly is not None:
            return self.mapping_anomaly
        return self.reconciliation.anomaly if self.reconciliation else None


class MappingSummary(BaseModel):
    """Address & balance overview for one account (no transfer)."""

    chain: str
    account: Account
    account_index: int | None = None
    native: NativeBalance
    execution_raw_balance: int
    execution_token_balance: int | None = None
    token_error: str | None = None
    reverse_mapping: str | None = None  # None = no mapping on chain
