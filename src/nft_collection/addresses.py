"""Account address helpers shared by collections and the factory."""

from __future__ import annotations

from .exceptions import InvalidRecipientError

ZERO_ADDRESS = "0x" + "0" * 40


def normalize_address(address: str) -> str:
    """
    Normalize an address for comparison.

    Addresses are opaque to the collection; two spellings that differ only
    in case or surrounding whitespace refer to the same account.

    Raises:
        InvalidRecipientError: If address is not a string
    """
    if not isinstance(address, str):
        raise InvalidRecipientError(
            f"Address must be a string, got {type(address).__name__}",
            details={"address": repr(address)},
        )
    return address.strip().lower()


def is_zero_address(address: str) -> bool:
    """True for the zero address (any case) and for the empty string."""
    normalized = normalize_address(address)
    return normalized in ("", ZERO_ADDRESS)


def short_address(address: str) -> str:
    """Truncated form used in log payloads."""
    return address[:10]
