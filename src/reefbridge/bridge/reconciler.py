"""Reconciliation reporter: before/after deltas and anomaly flags."""

import logging

from reefbridge.bridge.events import EventSink
from reefbridge.domain.enums import Anomaly, CallVariant, Stage, TransferState
from reefbridge.domain.models import BalanceSnapshot, CallSignature, ReconciliationResult, TransferOutcome

logger = logging.getLogger(__name__)


def reconcile(
    before: BalanceSnapshot,
    after: BalanceSnapshot,
    outcome: TransferOutcome | None = None,
    signature: CallSignature | None = None,
) -> ReconciliationResult:
    """Compute signed deltas (after - before). Negative native deltas are fees.

    NO_OP_TRANSFER takes precedence over SIGNATURE_UNRESOLVED.
    """
    native_delta = after.native_free - before.native_free
    execution_delta = after.execution_raw_balance - before.execution_raw_balance
    token_delta = None
    if before.execution_token_balance is not None and after.execution_token_balance is not None:
        token_delta = after.execution_token_balance - before.execution_token_balance

    anomaly = None
    if (
        outcome is not None
        and outcome.state == TransferState.FINALIZED
        and outcome.error is None
        and execution_delta == 0
    ):
        anomaly = Anomaly.NO_OP_TRANSFER
    elif signature is not None and signature.variant == CallVariant.UNKNOWN:
        anomaly = Anomaly.SIGNATURE_UNRESOLVED

    return ReconciliationResult(
        before=before,
        after=after,
        native_delta=native_delta,
        execution_delta=execution_delta,
        token_delta=token_delta,
        anomaly=anomaly,
    )


class ReconciliationReporter:
    def __init__(self, events: EventSink) -> None:
        self._events = events

    def reconcile(
        self,
        before: BalanceSnapshot,
        after: BalanceSnapshot,
        outcome: TransferOutcome | None = None,
        signature: CallSignature | None = None,
    ) -> ReconciliationResult:
        result = reconcile(before, after, outcome, signature)
        details = dict(native_delta=result.native_delta, execution_delta=result.execution_delta,
                       token_delta=result.token_delta)
        if result.anomaly == Anomaly.NO_OP_TRANSFER:
            self._events.warning(
                Stage.RECONCILE,
                "transfer finalized but execution balance unchanged; runtime may not move native → EVM",
                anomaly=result.anomaly.value, **details,
            )
        elif result.anomaly is not None:
            self._events.warning(Stage.RECONCILE, "reconciled with anomaly", anomaly=result.anomaly.value, **details)
        else:
            self._events.info(Stage.RECONCILE, "reconciled", **details)
        return result
