from enum import Enum


class CallVariant(str, Enum):
    """Argument shape of the chain's transfer call."""

    TWO_ARG_TARGET_AMOUNT = "TWO_ARG_TARGET_AMOUNT"  # (H160, amount)
    THREE_ARG_SOURCE_TARGET_AMOUNT = "THREE_ARG_SOURCE_TARGET_AMOUNT"  # (AccountId, H160, amount)
    NATIVE_ONLY_TRANSFER = "NATIVE_ONLY_TRANSFER"  # (AccountId, amount), does not bridge
    UNKNOWN = "UNKNOWN"
