"""Native ledger boundary.

Connection handling, key material and SCALE encoding live behind this
interface; the bridge components only see plain Python values.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, Field

from reefbridge.domain.enums import NoticeKind
from reefbridge.domain.models import CallArgMeta, NativeBalance


class StatusNotice(BaseModel):
    """One status update for a watched extrinsic."""

    kind: NoticeKind
    block_hash: str
    dispatch_error: str | None = None
    events: list[dict[str, Any]] = Field(default_factory=list)


StatusCallback = Callable[[StatusNotice], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(ABC):
    """Handle for a status stream. The stream stops after ``unsubscribe``."""

    @abstractmethod
    def unsubscribe(self) -> None: ...


class NativeLedgerClient(ABC):
    """Strategy interface for the native ledger RPC."""

    @property
    @abstractmethod
    def signer_address(self) -> str:
        """SS58 address of the signing key."""

    @property
    @abstractmethod
    def signer_public_key(self) -> bytes: ...

    @abstractmethod
    async def chain_name(self) -> str: ...

    @abstractmethod
    async def account_balance(self, address: str) -> NativeBalance: ...

    @abstractmethod
    async def account_next_index(self, address: str) -> int: ...

    @abstractmethod
    async def call_arguments(self, pallet: str, call: str) -> list[CallArgMeta]:
        """Declared arguments of ``pallet.call`` from runtime metadata."""

    @abstractmethod
    async def storage_value(self, pallet: str, storage: str, key: Any) -> Any | None:
        """Read a storage map entry. None when the entry is empty."""

    @abstractmethod
    async def submit(
        self,
        pallet: str,
        call: str,
        args: Sequence[Any],
        on_status: StatusCallback,
        on_error: ErrorCallback,
    ) -> Subscription:
        """Sign and submit ``pallet.call(*args)``.

        Status notices go to ``on_status``. A failure after this method
        returns (pool rejection, dropped extrinsic, lost connection) goes to
        ``on_error``; failures before that are raised.
        """

    async def close(self) -> None:
        return None
