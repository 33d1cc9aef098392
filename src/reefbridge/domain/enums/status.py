from enum import Enum


class TransferState(str, Enum):
    """Submission lifecycle. Ordered: SUBMITTED → INCLUDED → FINALIZED | DISPATCH_ERROR."""

    SUBMITTED = "SUBMITTED"
    INCLUDED = "INCLUDED"
    FINALIZED = "FINALIZED"
    DISPATCH_ERROR = "DISPATCH_ERROR"

    @property
    def is_terminal(self) -> bool:
        return self in (TransferState.FINALIZED, TransferState.DISPATCH_ERROR)


class NoticeKind(str, Enum):
    """Status notices pushed by the native ledger for a watched extrinsic."""

    IN_BLOCK = "IN_BLOCK"
    FINALIZED = "FINALIZED"
