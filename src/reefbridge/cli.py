"""Operator commands behind the scripts/ entry points."""

import asyncio
import logging

import click
from rich.console import Console
from rich.text import Text

from reefbridge.config import settings
from reefbridge.container import Container
from reefbridge.domain.address import derive_evm_address
from reefbridge.domain.enums import MappingStrategy
from reefbridge.domain.units import format_units, to_minor_units
from reefbridge.exceptions import BridgeError
from reefbridge.report.console import build_table, render_mapping_summary, render_run_report

logger = logging.getLogger(__name__)

console = Console()

SEND_USAGE = "Usage: send_to_evm.py --to <EVM_ADDRESS> --amount <REEF_AMOUNT>"


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)-5s %(name)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def _close(*clients) -> None:
    for client in clients:
        await client.close()


async def send_to_evm(container: Container, target: str, amount: str) -> int:
    minor = to_minor_units(amount)
    console.print(Text(f"Target EVM: {target}"))
    console.print(Text(f"Amount: {amount} REEF ({minor} minor units)"))
    ledger = container.native_ledger()
    http = container.http_client()
    try:
        service = container.service()
        report = await service.bridge(service.signer_account(), minor, target=target,
                                      strategy=MappingStrategy.CLAIM)
    finally:
        await _close(ledger, http)
    console.print(render_run_report(report))
    return 1 if report.error and report.outcome is None else 0


async def bridge_demo(container: Container) -> int:
    """Claim the signer's default EVM account and fund it with the demo amount."""
    minor = to_minor_units(container.settings().demo_amount)
    ledger = container.native_ledger()
    http = container.http_client()
    try:
        service = container.service()
        report = await service.bridge(service.signer_account(), minor, strategy=MappingStrategy.CLAIM)
    finally:
        await _close(ledger, http)
    console.print(render_run_report(report))
    return 1 if report.error and report.outcome is None else 0


async def map_account(container: Container, strategy: MappingStrategy) -> int:
    ledger = container.native_ledger()
    http = container.http_client()
    try:
        service = container.service()
        summary = await service.mapping_summary(service.signer_account(), strategy)
    finally:
        await _close(ledger, http)
    console.print(render_mapping_summary(summary))
    return 0


async def native_balance(container: Container, address: str | None) -> int:
    ledger = container.native_ledger()
    try:
        address = address or ledger.signer_address
        chain = await ledger.chain_name()
        balance = await ledger.account_balance(address)
    finally:
        await _close(ledger)
    console.print(Text(f"Chain: {chain}"))
    console.print(build_table([{
        "Account": address,
        "Free_REEF": format_units(balance.free),
        "Reserved_REEF": format_units(balance.reserved),
    }]))
    return 0


async def token_balance(container: Container, address: str | None) -> int:
    """Compare the raw eth_getBalance with the ERC-20 view for one address."""
    if address is None:
        ledger = container.native_ledger()
        try:
            address = derive_evm_address(ledger.signer_public_key)
        finally:
            await _close(ledger)

    http = container.http_client()
    try:
        eth = container.eth()
        view = container.token_view()
        raw = await eth.get_balance(address)
        token = await view.balance_of(address) if view is not None else None
    finally:
        await _close(http)
    console.print(build_table([
        {"Type": "EVM (Raw eth_getBalance)", "Address": address, "Balance_REEF": format_units(raw)},
        {"Type": "EVM (Precompile ERC20)", "Address": address, "Balance_REEF": format_units(token)},
    ]))
    return 0


def _run(coro) -> int:
    try:
        return asyncio.run(coro)
    except BridgeError as e:
        logger.error("%s", e)
        return 1


@click.command(name="send_to_evm.py")
@click.option("--to", "target", help="20-byte EVM address to fund")
@click.option("--amount", help="decimal REEF amount, e.g. 10.5")
@click.pass_context
def send_to_evm_main(ctx: click.Context, target: str | None, amount: str | None) -> None:
    """Send native REEF to an EVM address and reconcile both ledgers."""
    if not target or not amount:
        click.echo(SEND_USAGE, err=True)
        ctx.exit(1)
    setup_logging()
    ctx.exit(_run(send_to_evm(Container(), target, amount)))


@click.command(name="bridge_demo.py")
@click.pass_context
def bridge_demo_main(ctx: click.Context) -> None:
    """Claim the signer's EVM account and fund it with the demo amount."""
    setup_logging()
    ctx.exit(_run(bridge_demo(Container())))


@click.command(name="map_account.py")
@click.option("--claim", is_flag=True, help="claim instead of deriving the EVM address")
@click.pass_context
def map_account_main(ctx: click.Context, claim: bool) -> None:
    """Map the signer to its EVM address and show both balances."""
    setup_logging()
    strategy = MappingStrategy.CLAIM if claim else MappingStrategy.DERIVE
    ctx.exit(_run(map_account(Container(), strategy)))


@click.command(name="native_balance.py")
@click.argument("address", required=False)
@click.pass_context
def native_balance_main(ctx: click.Context, address: str | None) -> None:
    """Show free and reserved balance of an SS58 address (defaults to the signer)."""
    setup_logging()
    ctx.exit(_run(native_balance(Container(), address)))


@click.command(name="token_balance.py")
@click.argument("address", required=False)
@click.pass_context
def token_balance_main(ctx: click.Context, address: str | None) -> None:
    """Compare raw and ERC-20 balances of an EVM address (defaults to the signer's derived one)."""
    setup_logging()
    ctx.exit(_run(token_balance(Container(), address)))
