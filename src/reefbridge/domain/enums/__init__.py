from reefbridge.domain.enums.anomaly import Anomaly
from reefbridge.domain.enums.call_variant import CallVariant
from reefbridge.domain.enums.event import EventKind, Stage
from reefbridge.domain.enums.mapping import MappingState, MappingStrategy
from reefbridge.domain.enums.status import NoticeKind, TransferState

__all__ = [
    "Anomaly",
    "CallVariant",
    "EventKind",
    "MappingState",
    "MappingStrategy",
    "NoticeKind",
    "Stage",
    "TransferState",
]
