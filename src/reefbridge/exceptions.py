"""Bridge error taxonomy.

Every error carries the stage it was raised in plus enough context
(addresses, amount, call) to reproduce the failing operation.
"""

from typing import Any


class BridgeError(Exception):
    """Base class for all bridge errors."""

    stage: str = "bridge"

    def __init__(self, message: str, *, stage: str | None = None, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage
        self.context: dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def __str__(self) -> str:
        if not self.context:
            return f"[{self.stage}] {self.message}"
        ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"[{self.stage}] {self.message} ({ctx})"


class ExternalServiceError(BridgeError):
    """RPC transport failure or JSON-RPC error envelope."""

    stage = "rpc"


NetworkError = ExternalServiceError


class SnapshotError(ExternalServiceError):
    """A mandatory balance read failed."""

    stage = "snapshot"


class MappingMissingError(BridgeError):
    """No execution-layer address is available for the account."""

    stage = "mapping"


class NativeOnlyTransferSkipped(BridgeError):
    """The resolved transfer call moves value natively and does not bridge."""

    stage = "transfer"


class FinalityTimeoutError(BridgeError):
    stage = "lifecycle"


class InvalidAmountError(BridgeError, ValueError):
    stage = "input"


class InvalidAddressError(BridgeError, ValueError):
    stage = "input"
