"""AccountMapper: native account ↔ execution-layer address."""

import logging

from reefbridge.bridge.events import EventSink
from reefbridge.bridge.lifecycle import submit_and_wait
from reefbridge.domain.address import derive_evm_address, normalize_evm_address
from reefbridge.domain.enums import MappingState, MappingStrategy, Stage
from reefbridge.domain.models import Account
from reefbridge.exceptions import InvalidAddressError, MappingMissingError
from reefbridge.infra.native.base import NativeLedgerClient

logger = logging.getLogger(__name__)


class AccountMapper:
    """Establishes an account's execution address by claim or keccak derivation.

    Claim: read the claimed address from storage; if empty, submit the claim
    call, wait for finality and read it back. Derive: optionally register the
    account on chain, then take the last 20 bytes of keccak256(public key).
    """

    def __init__(
        self,
        ledger: NativeLedgerClient,
        events: EventSink,
        *,
        strategy: MappingStrategy = MappingStrategy.CLAIM,
        claim_pallet: str = "EvmAccounts",
        claim_call: str = "claim_default_account",
        claim_storage: str = "EvmAddresses",
        map_pallet: str = "Revive",
        map_call: str = "map_account",
        reverse_storage: str = "OriginalAccount",
        register_on_chain: bool = True,
        finality_timeout: float | None = None,
    ) -> None:
        self._ledger = ledger
        self._events = events
        self._strategy = strategy
        self._claim_pallet = claim_pallet
        self._claim_call = claim_call
        self._claim_storage = claim_storage
        self._map_pallet = map_pallet
        self._map_call = map_call
        self._reverse_storage = reverse_storage
        self._register_on_chain = register_on_chain
        self._finality_timeout = finality_timeout

    async def ensure_mapped(self, account: Account, strategy: MappingStrategy | None = None) -> Account:
        """Idempotent: an already-mapped account is returned unchanged."""
        if account.is_mapped:
            return account

        strategy = strategy or self._strategy
        if strategy == MappingStrategy.CLAIM:
            return await self._claim(account)
        return await self._derive(account)

    async def claimed_address(self, native_address: str) -> str | None:
        value = await self._ledger.storage_value(self._claim_pallet, self._claim_storage, native_address)
        if value is None:
            return None
        try:
            return normalize_evm_address(value)
        except InvalidAddressError:
            logger.warning("Ignoring malformed %s entry for %s: %r", self._claim_storage, native_address, value)
            return None

    async def reverse_lookup(self, execution_address: str) -> str | None:
        """Native account mapped to an execution address, or None when there is no mapping."""
        address = normalize_evm_address(execution_address)
        value = await self._ledger.storage_value(self._map_pallet, self._reverse_storage, address)
        if value is None:
            self._events.info(Stage.MAPPING, "no reverse mapping", execution=address)
            return None
        return str(value)

    async def _claim(self, account: Account) -> Account:
        existing = await self.claimed_address(account.native_address)
        if existing is not None:
            self._events.info(Stage.MAPPING, "execution address already claimed",
                              native=account.native_address, execution=existing)
            return account.with_mapping(existing, MappingState.CLAIMED)

        self._events.info(Stage.MAPPING, "claiming default execution address", native=account.native_address)
        outcome = await submit_and_wait(
            self._ledger, self._claim_pallet, self._claim_call, [],
            events=self._events, stage=Stage.MAPPING, timeout=self._finality_timeout,
        )

        claimed = await self.claimed_address(account.native_address)
        if claimed is None:
            raise MappingMissingError(
                "no execution address mapped after claim",
                native=account.native_address, dispatch_error=outcome.error, block=outcome.block_ref,
            )
        self._events.info(Stage.MAPPING, "execution address claimed",
                          native=account.native_address, execution=claimed)
        return account.with_mapping(claimed, MappingState.CLAIMED)

    async def _derive(self, account: Account) -> Account:
        if not account.public_key:
            raise MappingMissingError("no public key to derive from", native=account.native_address)

        if self._register_on_chain:
            outcome = await submit_and_wait(
                self._ledger, self._map_pallet, self._map_call, [],
                events=self._events, stage=Stage.MAPPING, timeout=self._finality_timeout,
            )
            if outcome.error:
                # e.g. AccountAlreadyMapped; derivation does not depend on it
                self._events.warning(Stage.MAPPING, "map call rejected", error=outcome.error)

        derived = derive_evm_address(account.public_key)
        self._events.info(Stage.MAPPING, "execution address derived",
                          native=account.native_address, execution=derived)
        return account.with_mapping(derived, MappingState.DERIVED)
