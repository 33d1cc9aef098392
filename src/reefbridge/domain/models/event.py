from typing import Any

from pydantic import BaseModel, Field

from reefbridge.domain.enums import EventKind, Stage


class BridgeEvent(BaseModel):
    """Structured record of something a bridge component did or observed."""

    stage: Stage
    kind: EventKind = EventKind.INFO
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
