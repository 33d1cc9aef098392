from enum import Enum


class Stage(str, Enum):
    """Pipeline stage that emitted a bridge event."""

    SESSION = "SESSION"
    MAPPING = "MAPPING"
    SIGNATURE = "SIGNATURE"
    SNAPSHOT = "SNAPSHOT"
    TRANSFER = "TRANSFER"
    RECONCILE = "RECONCILE"


class EventKind(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
