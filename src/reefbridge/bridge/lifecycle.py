"""Submission lifecycle state machine.

SUBMITTED → INCLUDED → FINALIZED, with DISPATCH_ERROR as the alternative
terminal state when the finality notice carries a dispatch rejection. The
tracker resolves exactly once and unsubscribes exactly once.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from reefbridge.bridge.events import EventSink
from reefbridge.domain.enums import NoticeKind, Stage, TransferState
from reefbridge.domain.models import TransferOutcome
from reefbridge.exceptions import FinalityTimeoutError
from reefbridge.infra.native.base import NativeLedgerClient, StatusNotice, Subscription

logger = logging.getLogger(__name__)


class SubmissionTracker:
    """Consumes status notices for one submitted call."""

    def __init__(self, label: str, events: EventSink, stage: Stage = Stage.TRANSFER) -> None:
        self._label = label
        self._events = events
        self._stage = stage
        self._state = TransferState.SUBMITTED
        self._history: list[TransferState] = [TransferState.SUBMITTED]
        self._included_in: str | None = None
        self._block_ref: str | None = None
        self._emitted: list[dict[str, Any]] = []
        self._error: str | None = None
        self._failure: Exception | None = None
        self._subscription: Subscription | None = None
        self._unsubscribed = False
        self._done = asyncio.Event()

    @property
    def state(self) -> TransferState:
        return self._state

    @property
    def unsubscribed(self) -> bool:
        return self._unsubscribed

    def attach(self, subscription: Subscription) -> None:
        """Bind the stream handle. Notices may already have arrived."""
        self._subscription = subscription
        if self._done.is_set():
            self._unsubscribe()

    def on_status(self, notice: StatusNotice) -> None:
        if self._done.is_set():
            logger.debug("%s: ignoring %s after terminal state", self._label, notice.kind.value)
            return

        if notice.kind == NoticeKind.IN_BLOCK:
            self._include(notice.block_hash)
            return

        # Some nodes skip the in-block notice; inclusion is implied by finality
        self._include(notice.block_hash)
        self._block_ref = notice.block_hash
        self._emitted = list(notice.events)
        if notice.dispatch_error:
            self._error = notice.dispatch_error
            self._advance(TransferState.DISPATCH_ERROR)
            self._events.error(
                self._stage, f"{self._label} dispatch error",
                block=notice.block_hash, error=notice.dispatch_error,
            )
        else:
            self._advance(TransferState.FINALIZED)
            self._events.info(self._stage, f"{self._label} finalized", block=notice.block_hash)
        for event in self._emitted:
            self._events.info(self._stage, f"{self._label} event", event=event)
        self._finish()

    def on_error(self, exc: Exception) -> None:
        if self._done.is_set():
            return
        self._failure = exc
        self._events.error(self._stage, f"{self._label} submission failed", error=str(exc))
        self._finish()

    async def wait(self, timeout: float | None = None) -> TransferOutcome:
        """Block until a terminal notice arrives. ``timeout=None`` waits forever."""
        try:
            await asyncio.wait_for(self._done.wait(), timeout)
        except asyncio.TimeoutError:
            self._unsubscribe()
            raise FinalityTimeoutError(
                "no finality notice before timeout",
                call=self._label, state=self._state.value, timeout=timeout,
            ) from None
        if self._failure is not None:
            raise self._failure
        return self.outcome()

    def outcome(self) -> TransferOutcome:
        return TransferOutcome(
            state=self._state,
            block_ref=self._block_ref or self._included_in,
            included_in=self._included_in,
            emitted_events=list(self._emitted),
            error=self._error,
            history=list(self._history),
        )

    def _include(self, block_hash: str) -> None:
        if self._state != TransferState.SUBMITTED:
            return
        self._included_in = block_hash
        self._advance(TransferState.INCLUDED)
        self._events.info(self._stage, f"{self._label} included", block=block_hash)

    def _advance(self, state: TransferState) -> None:
        self._state = state
        self._history.append(state)

    def _finish(self) -> None:
        self._done.set()
        self._unsubscribe()

    def _unsubscribe(self) -> None:
        if self._unsubscribed or self._subscription is None:
            return
        self._unsubscribed = True
        self._subscription.unsubscribe()


async def submit_and_wait(
    ledger: NativeLedgerClient,
    pallet: str,
    call: str,
    args: Sequence[Any],
    *,
    events: EventSink,
    stage: Stage = Stage.TRANSFER,
    timeout: float | None = None,
) -> TransferOutcome:
    """Sign, submit and drive one call to a terminal state."""
    label = f"{pallet}.{call}"
    tracker = SubmissionTracker(label, events, stage)
    events.info(stage, f"{label} submitting", args=len(args))
    subscription = await ledger.submit(pallet, call, args, tracker.on_status, tracker.on_error)
    tracker.attach(subscription)
    return await tracker.wait(timeout)
