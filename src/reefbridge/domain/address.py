"""Execution-layer (20-byte) address helpers."""

from eth_utils import is_hex_address, keccak, to_checksum_address

from reefbridge.exceptions import InvalidAddressError

EVM_ADDRESS_BYTES = 20


def normalize_evm_address(value: str | bytes) -> str:
    """Validate a 20-byte address and return its EIP-55 checksum form."""
    if isinstance(value, bytes):
        if len(value) != EVM_ADDRESS_BYTES:
            raise InvalidAddressError("expected 20 address bytes", length=len(value))
        return to_checksum_address(value)
    if not isinstance(value, str) or not is_hex_address(value):
        raise InvalidAddressError("not a 20-byte hex address", address=value)
    return to_checksum_address(value)


def derive_evm_address(public_key: bytes) -> str:
    """Derive an account's execution address: last 20 bytes of keccak256(public key)."""
    if not public_key:
        raise InvalidAddressError("cannot derive an address from an empty public key")
    return to_checksum_address(keccak(public_key)[-EVM_ADDRESS_BYTES:])
