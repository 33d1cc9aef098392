"""Metadata inspector: classifies the transfer call's argument shape."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from reefbridge.bridge.events import EventSink
from reefbridge.domain.enums import CallVariant, Stage
from reefbridge.domain.models import CallArgMeta, CallSignature
from reefbridge.infra.native.base import NativeLedgerClient

logger = logging.getLogger(__name__)

EVM_ADDRESS_MARKERS = ("h160", "h-160", "[u8; 20]")
ACCOUNT_ID_MARKERS = ("accountid",)


def _has_marker(haystacks: Iterable[str], markers: tuple[str, ...]) -> bool:
    return any(marker in text for text in haystacks for marker in markers)


def resolve(call_metadata: Iterable[CallArgMeta | Mapping[str, Any]]) -> CallSignature:
    """Classify declared call arguments into a CallSignature.

    Pure: depends only on argument count and marker substrings, matched
    case-insensitively in either the joined names or the joined type hints.
    Never raises; anything unrecognised is UNKNOWN.
    """
    args = [a if isinstance(a, CallArgMeta) else CallArgMeta.from_raw(dict(a)) for a in call_metadata]
    names = tuple(a.name for a in args)
    hints = tuple(a.type_name for a in args)
    joined = (",".join(names).lower(), ",".join(hints).lower())

    has_evm = _has_marker(joined, EVM_ADDRESS_MARKERS)
    has_account = _has_marker(joined, ACCOUNT_ID_MARKERS)

    if len(args) == 2 and has_evm:
        variant = CallVariant.TWO_ARG_TARGET_AMOUNT
    elif len(args) == 3 and has_account and has_evm:
        variant = CallVariant.THREE_ARG_SOURCE_TARGET_AMOUNT
    elif len(args) == 2 and has_account:
        variant = CallVariant.NATIVE_ONLY_TRANSFER
    else:
        variant = CallVariant.UNKNOWN

    return CallSignature(variant=variant, arg_names=names, arg_type_hints=hints)


class MetadataInspector:
    """Resolves the transfer call shape once per session and caches it."""

    def __init__(self, ledger: NativeLedgerClient, pallet: str, call: str, events: EventSink) -> None:
        self._ledger = ledger
        self._pallet = pallet
        self._call = call
        self._events = events
        self._signature: CallSignature | None = None

    @property
    def cached(self) -> CallSignature | None:
        return self._signature

    async def signature(self) -> CallSignature:
        if self._signature is not None:
            return self._signature

        args = await self._ledger.call_arguments(self._pallet, self._call)
        signature = resolve(args)
        self._signature = signature

        details = dict(call=f"{self._pallet}.{self._call}", names=list(signature.arg_names),
                       types=list(signature.arg_type_hints))
        if signature.variant == CallVariant.UNKNOWN:
            self._events.warning(Stage.SIGNATURE, "transfer signature unresolved", **details)
        else:
            self._events.info(Stage.SIGNATURE, f"transfer signature {signature.variant.value}", **details)
        return signature
