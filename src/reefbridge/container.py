from dependency_injector import containers, providers

from reefbridge.bridge.account_mapper import AccountMapper
from reefbridge.bridge.events import LoggingEventSink
from reefbridge.bridge.executor import TransferExecutor
from reefbridge.bridge.inspector import MetadataInspector
from reefbridge.bridge.oracle import BalanceOracle
from reefbridge.bridge.reconciler import ReconciliationReporter
from reefbridge.bridge.service import BridgeService
from reefbridge.config import Settings
from reefbridge.infra.evm.eth_rpc_client import EthRPCClient
from reefbridge.infra.evm.token_view import build_token_view
from reefbridge.infra.http.client import HttpClient
from reefbridge.infra.http.json_rpc_client import JsonRpcClient


def build_native_ledger(url: str, signer_uri: str, ss58_format: int):
    # substrate-interface is an optional extra; only the real adapter needs it
    from reefbridge.infra.native.substrate_client import build_substrate_client

    return build_substrate_client(url=url, signer_uri=signer_uri, ss58_format=ss58_format)


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    events = providers.Singleton(LoggingEventSink)

    http_client = providers.Singleton(HttpClient, timeout=settings.provided.rpc_timeout)

    evm_rpc = providers.Singleton(
        JsonRpcClient,
        url=settings.provided.evm_rpc_url,
        http_client=http_client,
        max_attempts=settings.provided.rpc_max_attempts,
    )

    eth = providers.Singleton(EthRPCClient, rpc=evm_rpc)

    token_view = providers.Singleton(
        build_token_view,
        eth=eth,
        contract_address=settings.provided.token_view_address,
    )

    native_ledger = providers.Singleton(
        build_native_ledger,
        url=settings.provided.native_ws_url,
        signer_uri=settings.provided.signer_uri,
        ss58_format=settings.provided.ss58_format,
    )

    inspector = providers.Singleton(
        MetadataInspector,
        ledger=native_ledger,
        pallet=settings.provided.transfer_pallet,
        call=settings.provided.transfer_call,
        events=events,
    )

    mapper = providers.Singleton(
        AccountMapper,
        ledger=native_ledger,
        events=events,
        claim_pallet=settings.provided.claim_pallet,
        claim_call=settings.provided.claim_call,
        claim_storage=settings.provided.claim_storage,
        map_pallet=settings.provided.map_pallet,
        map_call=settings.provided.map_call,
        reverse_storage=settings.provided.reverse_storage,
        finality_timeout=settings.provided.finality_timeout,
    )

    executor = providers.Singleton(
        TransferExecutor,
        ledger=native_ledger,
        events=events,
        pallet=settings.provided.transfer_pallet,
        call=settings.provided.transfer_call,
        finality_timeout=settings.provided.finality_timeout,
    )

    oracle = providers.Singleton(
        BalanceOracle,
        ledger=native_ledger,
        eth=eth,
        events=events,
        token_view=token_view,
    )

    reporter = providers.Singleton(ReconciliationReporter, events=events)

    service = providers.Singleton(
        BridgeService,
        ledger=native_ledger,
        inspector=inspector,
        mapper=mapper,
        executor=executor,
        oracle=oracle,
        reporter=reporter,
        events=events,
    )
