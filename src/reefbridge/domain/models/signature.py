"""Transfer call metadata and its resolved shape."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from reefbridge.domain.enums import CallVariant


class CallArgMeta(BaseModel):
    """One declared argument of a runtime call, as published in chain metadata."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str = ""

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "CallArgMeta":
        """Accept the metadata dialects seen in the wild.

        ``{"name": "dest", "type": "H160"}``, ``{"name": ..., "type": {"info": ...}}``
        and scale-info style ``{"name": ..., "type": 12, "typeName": "H160"}``.
        """
        type_field = raw.get("type")
        if isinstance(type_field, dict):
            type_field = type_field.get("info") or type_field.get("type") or ""
        hints = [str(h) for h in (raw.get("typeName"), type_field) if h not in (None, "")]
        return cls(name=str(raw.get("name") or ""), type_name=" ".join(hints))


class CallSignature(BaseModel):
    """Resolved once per session and read-only thereafter."""

    model_config = ConfigDict(frozen=True)

    variant: CallVariant
    arg_names: tuple[str, ...] = ()
    arg_type_hints: tuple[str, ...] = ()

    @property
    def is_bridging(self) -> bool:
        return self.variant != CallVariant.NATIVE_ONLY_TRANSFER
