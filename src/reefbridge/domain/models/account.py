from pydantic import BaseModel, ConfigDict, field_validator

from reefbridge.domain.address import normalize_evm_address
from reefbridge.domain.enums import MappingState
from reefbridge.exceptions import BridgeError


class Account(BaseModel):
    """A native account and (once mapped) its execution-layer address."""

    model_config = ConfigDict(frozen=True)

    native_address: str
    public_key: bytes = b""
    execution_address: str | None = None
    mapping_state: MappingState = MappingState.UNMAPPED

    @field_validator("execution_address")
    @classmethod
    def _checksum(cls, v: str | None) -> str | None:
        return normalize_evm_address(v) if v is not None else None

    @property
    def is_mapped(self) -> bool:
        return self.mapping_state != MappingState.UNMAPPED and self.execution_address is not None

    def with_mapping(self, execution_address: str, state: MappingState) -> "Account":
        """Return a copy carrying the mapping. An account is mapped at most once per run."""
        if state == MappingState.UNMAPPED:
            raise ValueError("mapping state must be CLAIMED or DERIVED")
        if self.mapping_state != MappingState.UNMAPPED:
            raise BridgeError(
                "account is already mapped",
                stage="mapping",
                native=self.native_address,
                execution=self.execution_address,
            )
        return Account(
            native_address=self.native_address,
            public_key=self.public_key,
            execution_address=execution_address,
            mapping_state=state,
        )
