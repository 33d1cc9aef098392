from reefbridge.domain.models.account import Account
from reefbridge.domain.models.balance import BalanceSnapshot, NativeBalance, ReconciliationResult
from reefbridge.domain.models.event import BridgeEvent
from reefbridge.domain.models.report import BridgeRunReport, MappingSummary
from reefbridge.domain.models.signature import CallArgMeta, CallSignature
from reefbridge.domain.models.transfer import TransferOutcome, TransferRequest

__all__ = [
    "Account",
    "BalanceSnapshot",
    "BridgeEvent",
    "BridgeRunReport",
    "CallArgMeta",
    "CallSignature",
    "MappingSummary",
    "NativeBalance",
    "ReconciliationResult",
    "TransferOutcome",
    "TransferRequest",
]
