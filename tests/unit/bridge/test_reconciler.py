from conftest import ONE_REEF
from reefbridge.bridge.reconciler import ReconciliationReporter, reconcile
from reefbridge.domain.enums import Anomaly, CallVariant, EventKind, Stage, TransferState
from reefbridge.domain.models import BalanceSnapshot, CallSignature, TransferOutcome


def _snap(native, execution, token=None, t=1):
    return BalanceSnapshot(native_free=native, execution_raw_balance=execution,
                           execution_token_balance=token, taken_at=t)


FINAL = TransferOutcome(state=TransferState.FINALIZED, block_ref="0xf1")


class TestReconcile:
    def test_no_op_transfer(self):
        result = reconcile(_snap(1000 * ONE_REEF, 0), _snap(990 * ONE_REEF, 0, t=2), outcome=FINAL)

        assert result.native_delta == -10 * ONE_REEF
        assert result.execution_delta == 0
        assert result.anomaly == Anomaly.NO_OP_TRANSFER

    def test_successful_bridge(self):
        result = reconcile(_snap(1000 * ONE_REEF, 0), _snap(989 * ONE_REEF, 10 * ONE_REEF, t=2), outcome=FINAL)

        assert result.execution_delta == 10 * ONE_REEF
        assert result.anomaly is None

    def test_dispatch_error_is_not_no_op(self):
        failed = TransferOutcome(state=TransferState.DISPATCH_ERROR, error="Revive.TransferFailed")

        result = reconcile(_snap(100, 0), _snap(99, 0, t=2), outcome=failed)
        assert result.anomaly is None

    def test_unresolved_signature(self):
        sig = CallSignature(variant=CallVariant.UNKNOWN)

        result = reconcile(_snap(100, 0), _snap(90, 10, t=2), outcome=FINAL, signature=sig)
        assert result.anomaly == Anomaly.SIGNATURE_UNRESOLVED

    def test_no_op_takes_precedence(self):
        sig = CallSignature(variant=CallVariant.UNKNOWN)

        result = reconcile(_snap(100, 0), _snap(90, 0, t=2), outcome=FINAL, signature=sig)
        assert result.anomaly == Anomaly.NO_OP_TRANSFER

    def test_token_delta(self):
        result = reconcile(_snap(100, 0, token=5), _snap(100, 0, token=8, t=2))
        assert result.token_delta == 3

    def test_token_delta_needs_both_sides(self):
        result = reconcile(_snap(100, 0, token=5), _snap(100, 0, t=2))
        assert result.token_delta is None

    def test_without_outcome(self):
        assert reconcile(_snap(100, 0), _snap(100, 0, t=2)).anomaly is None


class TestReconciliationReporter:
    def test_warns_on_no_op(self, events):
        ReconciliationReporter(events).reconcile(_snap(100, 0), _snap(90, 0, t=2), outcome=FINAL)

        (event,) = events.of_stage(Stage.RECONCILE)
        assert event.kind == EventKind.WARNING
        assert event.details["anomaly"] == "NO_OP_TRANSFER"

    def test_info_when_clean(self, events):
        ReconciliationReporter(events).reconcile(_snap(100, 0), _snap(90, 10, t=2), outcome=FINAL)

        (event,) = events.of_stage(Stage.RECONCILE)
        assert event.kind == EventKind.INFO
        assert event.details["execution_delta"] == 10
