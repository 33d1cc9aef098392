from enum import Enum


class MappingState(str, Enum):
    """How an account obtained its execution-layer address."""

    UNMAPPED = "UNMAPPED"
    CLAIMED = "CLAIMED"
    DERIVED = "DERIVED"


class MappingStrategy(str, Enum):
    CLAIM = "CLAIM"
    DERIVE = "DERIVE"
