from pydantic import BaseModel

from reefbridge.domain.enums import Anomaly


class NativeBalance(BaseModel):
    """system.account data for one address (minor units)."""

    free: int
    reserved: int = 0


class BalanceSnapshot(BaseModel):
    native_free: int
    native_reserved: int = 0
    execution_raw_balance: int
    execution_token_balance: int | None = None
    token_error: str | None = None  # why the optional token view is absent
    taken_at: int  # logical clock, strictly increasing per oracle


class ReconciliationResult(BaseModel):
    before: BalanceSnapshot
    after: BalanceSnapshot
    native_delta: int
    execution_delta: int
    token_delta: int | None = None
    anomaly: Anomaly | None = None
