import io

from rich.console import Console

from conftest import ALICE, ONE_REEF, TARGET
from reefbridge.domain.enums import Anomaly, CallVariant, MappingState, TransferState
from reefbridge.domain.models import (
    Account,
    BalanceSnapshot,
    BridgeRunReport,
    CallSignature,
    MappingSummary,
    NativeBalance,
    ReconciliationResult,
    TransferOutcome,
    TransferRequest,
)
from reefbridge.report.console import NO_MAPPING, build_table, render_mapping_summary, render_run_report

CLAIMED = "0x1111111111111111111111111111111111111111"


def _plain(renderable) -> str:
    console = Console(file=io.StringIO(), width=200)
    console.print(renderable)
    return console.file.getvalue()


def _account():
    return Account(native_address=ALICE).with_mapping(CLAIMED, MappingState.CLAIMED)


class TestBuildTable:
    def test_columns_and_rows(self):
        table = build_table([{"Type": "a", "Balance_REEF": "1"}, {"Type": "longer", "Balance_REEF": "22"}])
        assert [c.header for c in table.columns] == ["Type", "Balance_REEF"]
        assert table.row_count == 2
        assert table.columns[1].justify == "right"

    def test_values_are_not_markup(self):
        out = _plain(build_table([{"Error": "[mapping] no execution address"}]))
        assert "[mapping] no execution address" in out

    def test_empty(self):
        assert build_table([]).row_count == 0


class TestRenderRunReport:
    def test_no_op_report(self):
        before = BalanceSnapshot(native_free=1000 * ONE_REEF, execution_raw_balance=0, taken_at=1)
        after = BalanceSnapshot(native_free=990 * ONE_REEF, execution_raw_balance=0, taken_at=2)
        report = BridgeRunReport(
            chain="Development",
            account=_account(),
            request=TransferRequest(source=_account(), target_execution_address=TARGET,
                                    amount_minor_units=10 * ONE_REEF),
            signature=CallSignature(variant=CallVariant.TWO_ARG_TARGET_AMOUNT, arg_names=("dest", "value")),
            outcome=TransferOutcome(state=TransferState.FINALIZED, block_ref="0xf1"),
            reconciliation=ReconciliationResult(before=before, after=after, native_delta=-10 * ONE_REEF,
                                                 execution_delta=0, anomaly=Anomaly.NO_OP_TRANSFER),
        )

        out = _plain(render_run_report(report))
        assert "Chain:      Development" in out
        assert "10 REEF (10000000000000000000 minor units)" in out
        assert "FINALIZED in 0xf1" in out
        assert "Delta:      native -10 / EVM 0" in out
        assert "Anomaly:    NO_OP_TRANSFER" in out
        assert "Before TX" in out and "After TX" in out

    def test_unmapped_account(self):
        report = BridgeRunReport(chain="dev", account=Account(native_address=ALICE), error="boom",
                                 mapping_anomaly=Anomaly.MAPPING_MISSING)

        out = _plain(render_run_report(report))
        assert NO_MAPPING in out
        assert "Error:      boom" in out
        assert "MAPPING_MISSING" in out


class TestRenderMappingSummary:
    def test_summary(self):
        summary = MappingSummary(
            chain="Development", account=_account(), account_index=3,
            native=NativeBalance(free=5 * ONE_REEF), execution_raw_balance=0,
        )

        out = _plain(render_mapping_summary(summary))
        assert "Account index: 3" in out
        assert "EVM (Claimed)" in out
        assert NO_MAPPING in out
