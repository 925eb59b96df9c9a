"""
Exception hierarchy for NFT collection operations.

Every failure raised by a collection is deterministic validation: the
operation is aborted before any state is written, so none of these are
recoverable by retrying the same call.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class CollectionError(Exception):
    """Base exception for all collection errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable


# ==================== Configuration Errors ====================


class InvalidConfigurationError(CollectionError):
    """Raised for bad constructor arguments or an empty base URI update."""
    pass


class SettingsError(CollectionError):
    """Raised when an NFT_* environment setting cannot be parsed."""
    pass


# ==================== Authorization Errors ====================


class UnauthorizedError(CollectionError):
    """Raised when the caller lacks the role or approval an operation needs."""
    pass


class SelfApprovalError(CollectionError):
    """Raised when an account names itself as its own operator."""
    pass


# ==================== Token Errors ====================


class InvalidRecipientError(CollectionError):
    """Raised when the zero address is used as a mint or transfer target."""
    pass


class InvalidTokenIdError(CollectionError):
    """Raised when a token id is not a positive integer."""
    pass


class TokenAlreadyExistsError(CollectionError):
    """Raised when minting an id that is currently tracked as existing."""
    pass


class TokenNotFoundError(CollectionError):
    """Raised when an operation references a token that does not exist."""
    pass


class IncorrectOwnerError(CollectionError):
    """Raised when a transfer names a `from` address that does not own the token."""
    pass


# ==================== Supply Errors ====================


class SupplyExceededError(CollectionError):
    """Raised when a mint would push total supply past max supply."""
    pass


class BatchSupplyExceededError(SupplyExceededError):
    """Raised when a batch mint would push total supply past max supply."""
    pass


# ==================== Dispatch Errors ====================


class UnknownFunctionError(CollectionError):
    """Raised when an ABI signature or selector is not part of the collection."""
    pass
