"""Transfer executor: builds the call for the resolved shape and drives it to finality."""

import logging
from typing import Any

from pydantic import BaseModel

from reefbridge.bridge.events import EventSink
from reefbridge.bridge.lifecycle import submit_and_wait
from reefbridge.domain.enums import CallVariant, Stage
from reefbridge.domain.models import CallSignature, TransferOutcome, TransferRequest
from reefbridge.exceptions import NativeOnlyTransferSkipped
from reefbridge.infra.native.base import NativeLedgerClient

logger = logging.getLogger(__name__)

UNRESOLVED_WARNING = "transfer signature unresolved; used (H160, amount) fallback"


class BuiltCall(BaseModel):
    pallet: str
    call: str
    args: tuple[Any, ...]
    warnings: list[str] = []


class TransferExecutor:
    def __init__(
        self,
        ledger: NativeLedgerClient,
        events: EventSink,
        *,
        pallet: str = "Revive",
        call: str = "transfer",
        finality_timeout: float | None = None,
    ) -> None:
        self._ledger = ledger
        self._events = events
        self._pallet = pallet
        self._call = call
        self._finality_timeout = finality_timeout

    def build_call(self, request: TransferRequest, signature: CallSignature) -> BuiltCall:
        target = request.target_execution_address
        amount = request.amount_minor_units

        if signature.variant == CallVariant.NATIVE_ONLY_TRANSFER:
            raise NativeOnlyTransferSkipped(
                "not a bridging call",
                call=f"{self._pallet}.{self._call}",
                source=request.source.native_address, target=target, amount=amount,
            )
        if signature.variant == CallVariant.THREE_ARG_SOURCE_TARGET_AMOUNT:
            return BuiltCall(pallet=self._pallet, call=self._call,
                             args=(request.source.native_address, target, amount))
        if signature.variant == CallVariant.TWO_ARG_TARGET_AMOUNT:
            return BuiltCall(pallet=self._pallet, call=self._call, args=(target, amount))

        # UNKNOWN: optimistic two-argument fallback
        return BuiltCall(pallet=self._pallet, call=self._call, args=(target, amount),
                         warnings=[UNRESOLVED_WARNING])

    async def execute(self, request: TransferRequest, signature: CallSignature) -> TransferOutcome:
        built = self.build_call(request, signature)
        for warning in built.warnings:
            self._events.warning(Stage.TRANSFER, warning, names=list(signature.arg_names),
                                 types=list(signature.arg_type_hints))

        self._events.info(
            Stage.TRANSFER, f"calling {built.pallet}.{built.call}",
            variant=signature.variant.value, source=request.source.native_address,
            target=request.target_execution_address, amount=request.amount_minor_units,
        )
        outcome = await submit_and_wait(
            self._ledger, built.pallet, built.call, built.args,
            events=self._events, stage=Stage.TRANSFER, timeout=self._finality_timeout,
        )
        outcome.warnings.extend(built.warnings)
        return outcome
