"""Console rendering for run reports and mapping summaries."""

from rich.console import Group
from rich.table import Table
from rich.text import Text

from reefbridge.domain.models import BalanceSnapshot, BridgeRunReport, MappingSummary
from reefbridge.domain.units import format_units

NO_MAPPING = "no mapping"


def build_table(rows: list[dict[str, object]], title: str | None = None) -> Table:
    """Table over rows sharing the same keys. Balance columns are right-aligned."""
    table = Table(title=title)
    if not rows:
        return table
    headers = list(rows[0].keys())
    for i, header in enumerate(headers):
        if "REEF" in header:
            table.add_column(header, style="green", justify="right")
        else:
            table.add_column(header, style="cyan" if i == 0 else None)
    for row in rows:
        # Text cells: values are never parsed as markup
        table.add_row(*(Text(str(row.get(h, ""))) for h in headers))
    return table


def _snapshot_row(label: str, snap: BalanceSnapshot) -> dict[str, object]:
    return {
        "Type": label,
        "Native_REEF": format_units(snap.native_free),
        "EVM_REEF": format_units(snap.execution_raw_balance),
        "EVM_ERC20_REEF": format_units(snap.execution_token_balance),
    }


def render_run_report(report: BridgeRunReport) -> Group:
    acct = report.account
    lines = [
        f"Chain:      {report.chain}",
        f"Native:     {acct.native_address}",
        f"EVM:        {acct.execution_address or NO_MAPPING} ({acct.mapping_state.value})",
    ]
    if report.request is not None:
        lines.append(f"Target:     {report.request.target_execution_address}")
        lines.append(
            f"Amount:     {format_units(report.request.amount_minor_units)} REEF "
            f"({report.request.amount_minor_units} minor units)"
        )
    if report.signature is not None:
        lines.append(f"Signature:  {report.signature.variant.value} {list(report.signature.arg_names)}")
    if report.skip_reason:
        lines.append(f"Skipped:    {report.skip_reason}")
    if report.outcome is not None:
        lines.append(f"Outcome:    {report.outcome.state.value} in {report.outcome.block_ref}")
        lines.extend(f"Warning:    {w}" for w in report.outcome.warnings)
    if report.error:
        lines.append(f"Error:      {report.error}")

    parts: list = [Text(line) for line in lines]
    rec = report.reconciliation
    if rec is not None:
        parts.append(build_table(
            [_snapshot_row("Before TX", rec.before), _snapshot_row("After TX", rec.after)],
            title="Balances",
        ))
        parts.append(Text(
            f"Delta:      native {format_units(rec.native_delta)} / EVM {format_units(rec.execution_delta)}"
        ))
    if report.anomaly is not None:
        parts.append(Text(f"Anomaly:    {report.anomaly.value}", style="bold yellow"))
    return Group(*parts)


def render_mapping_summary(summary: MappingSummary) -> Group:
    acct = summary.account
    balances = build_table([
        {"Type": "Native/Substrate", "Address": acct.native_address,
         "Balance_REEF": format_units(summary.native.free)},
        {"Type": f"EVM ({acct.mapping_state.value.title()})", "Address": acct.execution_address,
         "Balance_REEF": format_units(summary.execution_raw_balance)},
        {"Type": "EVM (ERC20 view)", "Address": acct.execution_address,
         "Balance_REEF": format_units(summary.execution_token_balance)},
    ], title="Address & Balance Summary")
    reverse = build_table([
        {"EVM Address": acct.execution_address, "Mapped Native Account": summary.reverse_mapping or NO_MAPPING},
    ], title="Reverse Mapping Check")

    parts: list = [
        Text(f"Chain: {summary.chain}"),
        Text(f"Account index: {summary.account_index}"),
        balances,
        reverse,
    ]
    if summary.token_error:
        parts.append(Text(f"ERC20 view unavailable: {summary.token_error}", style="yellow"))
    return Group(*parts)
