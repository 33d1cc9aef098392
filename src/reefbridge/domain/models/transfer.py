"""Transfer request and the outcome of one submission."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from reefbridge.domain.address import normalize_evm_address
from reefbridge.domain.enums import TransferState
from reefbridge.domain.models.account import Account
from reefbridge.domain.units import MAX_UINT256


class TransferRequest(BaseModel):
    source: Account
    target_execution_address: str
    amount_minor_units: int

    @field_validator("target_execution_address")
    @classmethod
    def _checksum(cls, v: str) -> str:
        return normalize_evm_address(v)

    @field_validator("amount_minor_units")
    @classmethod
    def _uint256(cls, v: int) -> int:
        if v < 0 or v > MAX_UINT256:
            raise ValueError("amount must fit in uint256")
        return v


class TransferOutcome(BaseModel):
    """Terminal (or timed-out) view of a submitted call."""

    state: TransferState
    block_ref: str | None = None
    included_in: str | None = None
    emitted_events: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    history: list[TransferState] = Field(default_factory=list)  # states in the order reached

    @property
    def succeeded(self) -> bool:
        return self.state == TransferState.FINALIZED and self.error is None
