import asyncio
from collections.abc import Callable, Sequence
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from reefbridge.bridge.events import RecordingEventSink
from reefbridge.domain.enums import NoticeKind
from reefbridge.domain.models import CallArgMeta, NativeBalance
from reefbridge.exceptions import ExternalServiceError
from reefbridge.infra.native.base import NativeLedgerClient, StatusNotice, Subscription

ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
ALICE_PUBKEY = bytes.fromhex("d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d")
TARGET = "0x0000000000000000000000000000000000001234"
ONE_REEF = 10**18

TWO_ARG_TRANSFER = [CallArgMeta(name="dest", type_name="H160"), CallArgMeta(name="value", type_name="Balance")]


def in_block(block: str = "0xb1") -> StatusNotice:
    return StatusNotice(kind=NoticeKind.IN_BLOCK, block_hash=block)


def finalized(block: str = "0xf1", dispatch_error: str | None = None, events=None) -> StatusNotice:
    return StatusNotice(kind=NoticeKind.FINALIZED, block_hash=block, dispatch_error=dispatch_error,
                        events=events or [])


class FakeSubscription(Subscription):
    def __init__(self) -> None:
        self.unsubscribe_calls = 0

    def unsubscribe(self) -> None:
        self.unsubscribe_calls += 1


class FakeNativeLedger(NativeLedgerClient):
    """In-memory native ledger that replays scripted status notices."""

    def __init__(self, address: str = ALICE, public_key: bytes = ALICE_PUBKEY, chain: str = "Development") -> None:
        self._address = address
        self._public_key = public_key
        self._chain = chain
        self.balances: dict[str, NativeBalance] = {address: NativeBalance(free=1000 * ONE_REEF)}
        self.storage: dict[tuple[str, str, str], Any] = {}
        self.call_args: dict[tuple[str, str], list[CallArgMeta]] = {("Revive", "transfer"): list(TWO_ARG_TRANSFER)}
        self.notices: dict[tuple[str, str], list[StatusNotice]] = {}
        self.effects: dict[tuple[str, str], Callable[[Sequence[Any]], None]] = {}
        self.submissions: list[tuple[str, str, tuple]] = []
        self.subscriptions: list[FakeSubscription] = []
        self.metadata_reads = 0
        self.balance_reads = 0
        self.fail_balance = False
        self.submit_error: Exception | None = None
        self.async_error: Exception | None = None
        self.deliver_sync = False

    @property
    def signer_address(self) -> str:
        return self._address

    @property
    def signer_public_key(self) -> bytes:
        return self._public_key

    async def chain_name(self) -> str:
        return self._chain

    async def account_balance(self, address: str) -> NativeBalance:
        self.balance_reads += 1
        if self.fail_balance:
            raise ExternalServiceError("connection reset", method="System.Account")
        return self.balances.get(address, NativeBalance(free=0))

    async def account_next_index(self, address: str) -> int:
        return len(self.submissions)

    async def call_arguments(self, pallet: str, call: str) -> list[CallArgMeta]:
        self.metadata_reads += 1
        if (pallet, call) not in self.call_args:
            raise ExternalServiceError("call not found in runtime metadata", pallet=pallet, call=call)
        return self.call_args[(pallet, call)]

    async def storage_value(self, pallet: str, storage: str, key: Any) -> Any | None:
        return self.storage.get((pallet, storage, str(key)))

    async def submit(self, pallet, call, args, on_status, on_error) -> Subscription:
        if self.submit_error is not None:
            raise self.submit_error
        self.submissions.append((pallet, call, tuple(args)))
        effect = self.effects.get((pallet, call))
        if effect is not None:
            effect(args)

        subscription = FakeSubscription()
        self.subscriptions.append(subscription)
        notices = self.notices.get((pallet, call), [in_block(), finalized()])
        if self.deliver_sync:
            for notice in notices:
                on_status(notice)
        else:
            loop = asyncio.get_running_loop()
            for notice in notices:
                loop.call_soon(on_status, notice)
            if self.async_error is not None:
                loop.call_soon(on_error, self.async_error)
        return subscription


@pytest.fixture()
def events():
    return RecordingEventSink()


@pytest.fixture()
def ledger():
    return FakeNativeLedger()


@pytest.fixture()
def eth():
    """EthRPCClient double returning a fixed raw balance."""
    client = MagicMock()
    client.get_balance = AsyncMock(return_value=0)
    return client
