"""Event sinks: components emit BridgeEvents, the reporting layer consumes them."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from reefbridge.domain.enums import EventKind, Stage
from reefbridge.domain.models import BridgeEvent

logger = logging.getLogger("reefbridge.events")

_LEVELS = {
    EventKind.INFO: logging.INFO,
    EventKind.WARNING: logging.WARNING,
    EventKind.ERROR: logging.ERROR,
}


class EventSink(ABC):
    @abstractmethod
    def emit(self, event: BridgeEvent) -> None: ...

    def info(self, stage: Stage, message: str, **details: Any) -> None:
        self.emit(BridgeEvent(stage=stage, kind=EventKind.INFO, message=message, details=details))

    def warning(self, stage: Stage, message: str, **details: Any) -> None:
        self.emit(BridgeEvent(stage=stage, kind=EventKind.WARNING, message=message, details=details))

    def error(self, stage: Stage, message: str, **details: Any) -> None:
        self.emit(BridgeEvent(stage=stage, kind=EventKind.ERROR, message=message, details=details))


class LoggingEventSink(EventSink):
    def emit(self, event: BridgeEvent) -> None:
        if event.details:
            logger.log(_LEVELS[event.kind], "[%s] %s %s", event.stage.value, event.message, event.details)
        else:
            logger.log(_LEVELS[event.kind], "[%s] %s", event.stage.value, event.message)


class RecordingEventSink(EventSink):
    """Keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[BridgeEvent] = []

    def emit(self, event: BridgeEvent) -> None:
        self.events.append(event)

    def of_stage(self, stage: Stage) -> list[BridgeEvent]:
        return [e for e in self.events if e.stage == stage]

    def warnings(self) -> list[BridgeEvent]:
        return [e for e in self.events if e.kind == EventKind.WARNING]


class CompositeEventSink(EventSink):
    def __init__(self, *sinks: EventSink) -> None:
        self._sinks = list(sinks)

    def emit(self, event: BridgeEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)
