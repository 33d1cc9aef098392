"""NativeLedgerClient backed by substrate-interface.

substrate-interface is synchronous: every call runs in a worker thread and
the extrinsic watch pushes notices back onto the event loop.
"""

import asyncio
import logging
import threading
from collections.abc import Sequence
from typing import Any

from substrateinterface import ExtrinsicReceipt, Keypair, SubstrateInterface
from substrateinterface.exceptions import SubstrateRequestException

from reefbridge.domain.enums import NoticeKind
from reefbridge.domain.models import CallArgMeta, NativeBalance
from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.native.base import (
    ErrorCallback,
    NativeLedgerClient,
    StatusCallback,
    StatusNotice,
    Subscription,
)

logger = logging.getLogger(__name__)

_CANCELLED = "cancelled"
_FAILED_STATUSES = ("dropped", "invalid", "usurped", "finalityTimeout")


class _WatchSubscription(Subscription):
    def __init__(self) -> None:
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def unsubscribe(self) -> None:
        self._cancelled.set()


def _hex_hash(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


class SubstrateLedgerClient(NativeLedgerClient):
    def __init__(self, substrate: SubstrateInterface, keypair: Keypair) -> None:
        self._substrate = substrate
        self._keypair = keypair

    @property
    def signer_address(self) -> str:
        return self._keypair.ss58_address

    @property
    def signer_public_key(self) -> bytes:
        return bytes(self._keypair.public_key)

    async def _run(self, what: str, fn, *args, **kwargs) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except (SubstrateRequestException, ConnectionError, OSError, ValueError) as e:
            raise ExternalServiceError(f"native RPC failed: {e}", method=what) from e

    async def chain_name(self) -> str:
        resp = await self._run("system_chain", self._substrate.rpc_request, "system_chain", [])
        return str(resp["result"])

    async def account_balance(self, address: str) -> NativeBalance:
        result = await self._run("System.Account", self._substrate.query, "System", "Account", [address])
        data = result.value["data"]
        return NativeBalance(free=int(data["free"]), reserved=int(data.get("reserved", 0)))

    async def account_next_index(self, address: str) -> int:
        resp = await self._run(
            "system_accountNextIndex", self._substrate.rpc_request, "system_accountNextIndex", [address]
        )
        return int(resp["result"])

    async def call_arguments(self, pallet: str, call: str) -> list[CallArgMeta]:
        fn = await self._run(
            f"{pallet}.{call}", self._substrate.get_metadata_call_function, pallet, call
        )
        if fn is None:
            raise ExternalServiceError("call not found in runtime metadata", pallet=pallet, call=call)
        return [CallArgMeta.from_raw(arg.value) for arg in fn.args]

    async def storage_value(self, pallet: str, storage: str, key: Any) -> Any | None:
        result = await self._run(f"{pallet}.{storage}", self._substrate.query, pallet, storage, [key])
        value = result.value if result is not None else None
        return value if value not in (None, "", b"") else None

    async def submit(
        self,
        pallet: str,
        call: str,
        args: Sequence[Any],
        on_status: StatusCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        declared = await self.call_arguments(pallet, call)
        if len(args) != len(declared):
            raise ExternalServiceError(
                "argument count does not match runtime metadata",
                pallet=pallet, call=call, declared=[meta.name for meta in declared], args=len(args),
            )
        params = {meta.name: value for meta, value in zip(declared, args)}

        def _sign() -> Any:
            call_obj = self._substrate.compose_call(call_module=pallet, call_function=call, call_params=params)
            return self._substrate.create_signed_extrinsic(call=call_obj, keypair=self._keypair)

        extrinsic = await self._run(f"{pallet}.{call}", _sign)
        subscription = _WatchSubscription()
        loop = asyncio.get_running_loop()
        label = f"{pallet}.{call}"

        def push(notice: StatusNotice) -> None:
            loop.call_soon_threadsafe(on_status, notice)

        def fail(exc: Exception) -> None:
            loop.call_soon_threadsafe(on_error, exc)

        def handler(message: dict, update_nr: int, subscription_id: str) -> Any:
            if subscription.cancelled:
                return _CANCELLED
            status = message["params"]["result"]
            if isinstance(status, dict):
                if "inBlock" in status:
                    push(StatusNotice(kind=NoticeKind.IN_BLOCK, block_hash=status["inBlock"]))
                if "finalized" in status:
                    return status["finalized"]
                for key in _FAILED_STATUSES:
                    if key in status:
                        raise ExternalServiceError(f"extrinsic {key}", call=label, detail=status[key])
            elif status in _FAILED_STATUSES:
                raise ExternalServiceError(f"extrinsic {status}", call=label)
            return None

        def watch() -> None:
            try:
                block_hash = self._substrate.rpc_request(
                    "author_submitAndWatchExtrinsic", [str(extrinsic.data)], result_handler=handler
                )
                if block_hash == _CANCELLED:
                    logger.debug("Watch for %s stopped after unsubscribe", label)
                    return
                receipt = ExtrinsicReceipt(
                    substrate=self._substrate,
                    extrinsic_hash=_hex_hash(extrinsic.extrinsic_hash),
                    block_hash=block_hash,
                )
                dispatch_error = None
                if not receipt.is_success:
                    dispatch_error = str(receipt.error_message)
                events = [dict(event.value) for event in receipt.triggered_events]
                push(StatusNotice(
                    kind=NoticeKind.FINALIZED,
                    block_hash=block_hash,
                    dispatch_error=dispatch_error,
                    events=events,
                ))
            except ExternalServiceError as e:
                fail(e)
            except Exception as e:
                # every watch failure reaches on_error
                fail(ExternalServiceError(f"extrinsic watch failed: {e!r}", call=label))

        threading.Thread(target=watch, name=f"watch-{label}", daemon=True).start()
        logger.debug("Submitted %s with %d args", label, len(params))
        return subscription

    async def close(self) -> None:
        await asyncio.to_thread(self._substrate.close)


def build_substrate_client(url: str, signer_uri: str, ss58_format: int = 42) -> SubstrateLedgerClient:
    """Connect to the native ledger and load a development key (e.g. ``//Alice``)."""
    try:
        substrate = SubstrateInterface(url=url, ss58_format=ss58_format)
    except (ConnectionError, OSError) as e:
        raise ExternalServiceError(f"cannot connect: {e}", url=url) from e
    keypair = Keypair.create_from_uri(signer_uri, ss58_format=ss58_format)
    return SubstrateLedgerClient(substrate, keypair)
