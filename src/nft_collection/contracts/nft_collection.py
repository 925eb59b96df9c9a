"""
Capped NFT Collection (ERC721-style) implementation.

This module provides a single-owner, fixed-supply NFT collection with
the ERC721 ownership and approval model:
- Owner-gated minting (single and batch) up to a hard max supply
- Burning by the token holder or the collection owner
- transferFrom / safeTransferFrom with per-token and operator approvals
- Metadata URIs built from a mutable base URI prefix

Security features:
- Owner verification on all privileged calls
- Zero address checks on mint and transfer targets
- Approvals cleared whenever a token changes hands or is burned
- All-or-nothing operations: every check runs before the first write,
  so a rejected call leaves no state change and emits no event
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Iterable

from Crypto.Hash import keccak

from ..addresses import ZERO_ADDRESS, is_zero_address, normalize_address, short_address
from ..config import Settings, load_settings
from ..exceptions import (
    BatchSupplyExceededError,
    IncorrectOwnerError,
    InvalidConfigurationError,
    InvalidRecipientError,
    InvalidTokenIdError,
    SelfApprovalError,
    SupplyExceededError,
    TokenAlreadyExistsError,
    TokenNotFoundError,
    UnauthorizedError,
    UnknownFunctionError,
)

logger = logging.getLogger(__name__)

CONTRACT_TYPE = "NFTCollection"

# ABI signature -> (attribute, takes caller as first argument)
NFT_COLLECTION_FUNCTIONS: dict[str, tuple[str, bool]] = {
    # Metadata
    "name()": ("name", False),
    "symbol()": ("symbol", False),
    "owner()": ("owner", False),
    "maxSupply()": ("max_supply", False),
    "tokenURI(uint256)": ("token_uri", False),
    # Views
    "totalSupply()": ("total_supply", False),
    "remainingSupply()": ("remaining_supply", False),
    "balanceOf(address)": ("balance_of", False),
    "ownerOf(uint256)": ("owner_of", False),
    "getApproved(uint256)": ("get_approved", False),
    "isApprovedForAll(address,address)": ("is_approved_for_all", False),
    "tokenExists(uint256)": ("token_exists", False),
    "isValidTokenId(uint256)": ("is_valid_token_id", False),
    # State-changing
    "safeMint(address,uint256)": ("safe_mint", True),
    "batchMint(address,uint256[])": ("batch_mint", True),
    "burn(uint256)": ("burn", True),
    "transferFrom(address,address,uint256)": ("transfer_from", True),
    "safeTransferFrom(address,address,uint256)": ("safe_transfer_from", True),
    "safeTransferFrom(address,address,uint256,bytes)": ("safe_transfer_from", True),
    "approve(address,uint256)": ("approve", True),
    "setApprovalForAll(address,bool)": ("set_approval_for_all", True),
    "setBaseURI(string)": ("set_base_uri", True),
}


def function_selector(signature: str) -> str:
    """
    Compute the 4-byte function selector for an ABI signature.

    Args:
        signature: Canonical signature, e.g. "transferFrom(address,address,uint256)"

    Returns:
        Selector as 8 lowercase hex characters
    """
    k = keccak.new(digest_bits=256)
    k.update(signature.encode("utf-8"))
    return k.hexdigest()[:8]


@lru_cache(maxsize=1)
def _selector_table() -> dict[str, str]:
    return {function_selector(sig): sig for sig in NFT_COLLECTION_FUNCTIONS}


@dataclass
class NFTEvent:
    """Represents a collection event."""

    # "Transfer", "Approval", "ApprovalForAll", "TokenMinted", "TokenBurned", "BaseURIUpdated"
    event_type: str
    from_address: str = ""
    to_address: str = ""
    token_id: int = 0
    approved: bool = False  # For ApprovalForAll
    uri: str = ""  # For BaseURIUpdated
    timestamp: float = field(default_factory=time.time)

    @property
    def args(self) -> tuple:
        """Event arguments in declaration order."""
        if self.event_type in ("Transfer", "Approval"):
            return (self.from_address, self.to_address, self.token_id)
        if self.event_type == "ApprovalForAll":
            return (self.from_address, self.to_address, self.approved)
        if self.event_type == "TokenMinted":
            return (self.to_address, self.token_id)
        if self.event_type == "TokenBurned":
            return (self.token_id,)
        if self.event_type == "BaseURIUpdated":
            return (self.uri,)
        return ()


@dataclass
class NftCollection:
    """
    Fixed-supply NFT collection with a single administrative owner.

    Token ids are caller-chosen positive integers. A burned id is free to
    be minted again.

    Security features:
    - Only the collection owner mints, batch mints and updates the base URI
    - Token holder or collection owner may burn
    - Transfers require the holder, the approved spender or an operator
    """

    # Collection configuration
    name: str
    symbol: str
    max_supply: int
    base_uri: str

    # Owner (for admin functions)
    owner: str

    # Contract address
    address: str = ""

    # Token state (never passed to the constructor; a new collection is empty)
    owners: dict[int, str] = field(default_factory=dict, init=False)  # tokenId -> owner
    balances: dict[str, int] = field(default_factory=dict, init=False)  # owner -> count
    token_approvals: dict[int, str] = field(
        default_factory=dict, init=False
    )  # tokenId -> approved
    operator_approvals: dict[str, dict[str, bool]] = field(
        default_factory=dict, init=False
    )  # owner -> operator -> approved
    supply: int = field(default=0, init=False)

    # Events
    events: list[NFTEvent] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        """Validate configuration and initialize the contract."""
        if (
            isinstance(self.max_supply, bool)
            or not isinstance(self.max_supply, int)
            or self.max_supply <= 0
        ):
            raise InvalidConfigurationError(
                "Max supply must be greater than 0",
                details={"max_supply": self.max_supply},
            )
        if not isinstance(self.base_uri, str) or not self.base_uri:
            raise InvalidConfigurationError("Base URI cannot be empty")
        if not isinstance(self.owner, str) or is_zero_address(self.owner):
            raise InvalidConfigurationError(
                "Owner cannot be zero address", details={"owner": self.owner}
            )

        self.owner = normalize_address(self.owner)

        if not self.address:
            addr_input = f"{self.owner}{self.name}{self.symbol}{time.time()}".encode()
            addr_hash = hashlib.sha3_256(addr_input).digest()
            self.address = f"0x{addr_hash[-20:].hex()}"

    # ==================== View Functions ====================

    def total_supply(self) -> int:
        """Get number of currently existing tokens."""
        return self.supply

    def remaining_supply(self) -> int:
        """Get how many more tokens can be minted."""
        return self.max_supply - self.supply

    def balance_of(self, account: str) -> int:
        """
        Get number of tokens owned by an address.

        Args:
            account: Owner address

        Returns:
            Number of tokens owned (zero if none)
        """
        return self.balances.get(normalize_address(account), 0)

    def owner_of(self, token_id: int) -> str:
        """
        Get the owner of a token.

        Raises:
            TokenNotFoundError: If token doesn't exist
        """
        self._require_minted(token_id)
        return self.owners[token_id]

    def token_exists(self, token_id: int) -> bool:
        """Check whether a token currently exists."""
        return self.is_valid_token_id(token_id) and token_id in self.owners

    def get_approved(self, token_id: int) -> str:
        """
        Get approved spender for a token.

        Returns:
            Approved address (zero address if none)

        Raises:
            TokenNotFoundError: If token doesn't exist
        """
        self._require_minted(token_id)
        return self.token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, account: str, operator: str) -> bool:
        """Check if operator may act for every token of account."""
        account_norm = normalize_address(account)
        operator_norm = normalize_address(operator)
        return self.operator_approvals.get(account_norm, {}).get(operator_norm, False)

    def token_uri(self, token_id: int) -> str:
        """
        Get the metadata URI for a token: base URI followed by the decimal id.

        Raises:
            TokenNotFoundError: If token doesn't exist
        """
        self._require_minted(token_id)
        return f"{self.base_uri}{token_id}"

    @staticmethod
    def is_valid_token_id(token_id: Any) -> bool:
        """True iff token_id is a positive integer, regardless of existence."""
        return isinstance(token_id, int) and not isinstance(token_id, bool) and token_id > 0

    def events_of_type(self, event_type: str) -> list[NFTEvent]:
        """Return emitted events of a single type, oldest first."""
        return [event for event in self.events if event.event_type == event_type]

    # ==================== Minting & Burning ====================

    def safe_mint(self, caller: str, to: str, token_id: int) -> int:
        """
        Mint a new token.

        Args:
            caller: Address calling mint (must be owner)
            to: Recipient address
            token_id: Token ID to create

        Returns:
            Minted token ID

        Raises:
            UnauthorizedError: If caller is not the collection owner
            InvalidRecipientError: If to is the zero address
            InvalidTokenIdError: If token_id is not positive
            TokenAlreadyExistsError: If token_id already exists
            SupplyExceededError: If max supply is reached
        """
        self._require_owner(caller, "safeMint")
        to_norm = self._require_recipient(to, "Cannot mint to zero address")
        self._require_valid_token_id(token_id)

        if token_id in self.owners:
            raise TokenAlreadyExistsError(
                "Token already minted", details={"token_id": token_id}
            )
        if self.supply >= self.max_supply:
            raise SupplyExceededError(
                "Max supply reached", details={"max_supply": self.max_supply}
            )

        self._mint(to_norm, token_id)

        logger.info(
            "NFT mint",
            extra={
                "event": "nft.mint",
                "collection": self.symbol,
                "token_id": token_id,
                "to": short_address(to_norm),
                "total_supply": self.supply,
            }
        )

        return token_id

    mint = safe_mint

    def batch_mint(self, caller: str, to: str, token_ids: Iterable[int]) -> list[int]:
        """
        Mint several tokens to one recipient.

        Supply headroom is checked once against the pre-batch total. The
        batch is all-or-nothing: an invalid or duplicate id anywhere in the
        list rejects the whole call before any token is created.

        Returns:
            Minted token IDs in input order
        """
        self._require_owner(caller, "batchMint")
        to_norm = self._require_recipient(to, "Cannot mint to zero address")

        ids = list(token_ids)
        if not ids:
            raise InvalidTokenIdError("Token ID list cannot be empty")
        if self.supply + len(ids) > self.max_supply:
            raise BatchSupplyExceededError(
                "Batch mint exceeds max supply",
                details={
                    "requested": len(ids),
                    "total_supply": self.supply,
                    "max_supply": self.max_supply,
                },
            )

        pending: set[int] = set()
        for token_id in ids:
            self._require_valid_token_id(token_id)
            if token_id in self.owners or token_id in pending:
                raise TokenAlreadyExistsError(
                    "Token already minted", details={"token_id": token_id}
                )
            pending.add(token_id)

        for token_id in ids:
            self._mint(to_norm, token_id)

        logger.info(
            "NFT batch mint",
            extra={
                "event": "nft.batch_mint",
                "collection": self.symbol,
                "count": len(ids),
                "to": short_address(to_norm),
                "total_supply": self.supply,
            }
        )

        return ids

    def burn(self, caller: str, token_id: int) -> bool:
        """
        Burn a token.

        Args:
            caller: Message sender (token holder or collection owner)
            token_id: Token ID to burn

        Returns:
            True if successful
        """
        holder = self.owner_of(token_id)
        caller_norm = normalize_address(caller)

        if caller_norm != holder and caller_norm != self.owner:
            logger.warning(
                "NFT burn rejected",
                extra={
                    "event": "nft.burn_rejected",
                    "collection": self.symbol,
                    "token_id": token_id,
                    "caller": short_address(caller_norm),
                }
            )
            raise UnauthorizedError(
                "Caller is not token owner or contract owner",
                details={"token_id": token_id, "caller": caller_norm},
            )

        self.token_approvals.pop(token_id, None)
        self._decrement_balance(holder)
        del self.owners[token_id]
        self.supply -= 1

        self._emit("Transfer", from_address=holder, to_address=ZERO_ADDRESS, token_id=token_id)
        self._emit("TokenBurned", token_id=token_id)

        logger.info(
            "NFT burn",
            extra={
                "event": "nft.burn",
                "collection": self.symbol,
                "token_id": token_id,
                "total_supply": self.supply,
            }
        )

        return True

    # ==================== Transfers & Approvals ====================

    def transfer_from(
        self, caller: str, from_addr: str, to_addr: str, token_id: int
    ) -> bool:
        """
        Transfer a token.

        Args:
            caller: Message sender
            from_addr: Current owner
            to_addr: New owner
            token_id: Token ID

        Returns:
            True if successful
        """
        self._transfer(caller, from_addr, to_addr, token_id)
        return True

    def safe_transfer_from(
        self,
        caller: str,
        from_addr: str,
        to_addr: str,
        token_id: int,
        data: bytes = b"",
    ) -> bool:
        """
        Safely transfer a token.

        State effects are identical to transfer_from; data is accepted for
        receiver acknowledgement and carried nowhere else.
        """
        self._transfer(caller, from_addr, to_addr, token_id)
        return True

    def approve(self, caller: str, spender: str, token_id: int) -> bool:
        """
        Approve an address to transfer a specific token.

        Passing the zero address clears the approval.

        Args:
            caller: Token holder, one of its operators, or the collection owner
            spender: Address to approve
            token_id: Token ID

        Returns:
            True if successful
        """
        holder = self.owner_of(token_id)
        caller_norm = normalize_address(caller)

        if (
            caller_norm != holder
            and caller_norm != self.owner
            and not self.is_approved_for_all(holder, caller_norm)
        ):
            raise UnauthorizedError(
                "Caller is not token owner or approved for all",
                details={"token_id": token_id, "caller": caller_norm},
            )

        if is_zero_address(spender):
            spender_norm = ZERO_ADDRESS
            self.token_approvals.pop(token_id, None)
        else:
            spender_norm = normalize_address(spender)
            self.token_approvals[token_id] = spender_norm

        self._emit("Approval", from_address=holder, to_address=spender_norm, token_id=token_id)

        logger.debug(
            "NFT approval",
            extra={
                "event": "nft.approve",
                "collection": self.symbol,
                "token_id": token_id,
                "spender": short_address(spender_norm),
            }
        )

        return True

    def set_approval_for_all(
        self, caller: str, operator: str, approved: bool
    ) -> bool:
        """
        Set or revoke operator approval for all tokens of the caller.

        Returns:
            True if successful
        """
        caller_norm = normalize_address(caller)
        operator_norm = normalize_address(operator)

        if operator_norm == caller_norm:
            raise SelfApprovalError(
                "Cannot approve yourself", details={"caller": caller_norm}
            )

        approved = bool(approved)
        self.operator_approvals.setdefault(caller_norm, {})[operator_norm] = approved

        self._emit(
            "ApprovalForAll",
            from_address=caller_norm,
            to_address=operator_norm,
            approved=approved,
        )

        logger.debug(
            "NFT operator approval",
            extra={
                "event": "nft.approval_for_all",
                "collection": self.symbol,
                "operator": short_address(operator_norm),
                "approved": approved,
            }
        )

        return True

    # ==================== Admin Functions ====================

    def set_base_uri(self, caller: str, base_uri: str) -> bool:
        """Replace the base URI used to build token URIs."""
        self._require_owner(caller, "setBaseURI")
        if not isinstance(base_uri, str) or not base_uri:
            raise InvalidConfigurationError("Base URI cannot be empty")

        self.base_uri = base_uri
        self._emit("BaseURIUpdated", uri=base_uri)

        logger.info(
            "NFT base URI updated",
            extra={
                "event": "nft.base_uri_updated",
                "collection": self.symbol,
                "base_uri": base_uri,
            }
        )

        return True

    # ==================== ABI Dispatch ====================

    def call(self, caller: str, signature: str, *args: Any) -> Any:
        """
        Invoke a collection function by ABI signature.

        Args:
            caller: Message sender (ignored by view functions)
            signature: e.g. "safeMint(address,uint256)"
            *args: Function arguments in ABI order

        Raises:
            UnknownFunctionError: If signature is not part of the collection
        """
        entry = NFT_COLLECTION_FUNCTIONS.get(signature)
        if entry is None:
            raise UnknownFunctionError(
                f"Unknown function {signature}", details={"signature": signature}
            )

        attribute, takes_caller = entry
        target = getattr(self, attribute)
        if not callable(target):
            return target
        if takes_caller:
            return target(caller, *args)
        return target(*args)

    def call_selector(self, caller: str, selector: str, *args: Any) -> Any:
        """Invoke a collection function by its 4-byte selector."""
        key = selector.lower()
        if key.startswith("0x"):
            key = key[2:]
        signature = _selector_table().get(key)
        if signature is None:
            raise UnknownFunctionError(
                f"Unknown selector {selector}", details={"selector": selector}
            )
        return self.call(caller, signature, *args)

    # ==================== Helpers ====================

    def _require_minted(self, token_id: int) -> None:
        """Require token exists."""
        if not self.token_exists(token_id):
            raise TokenNotFoundError(
                "Token does not exist", details={"token_id": token_id}
            )

    def _require_owner(self, caller: str, action: str) -> None:
        """Require caller is contract owner."""
        caller_norm = normalize_address(caller)
        if caller_norm != self.owner:
            logger.warning(
                "NFT privileged call rejected",
                extra={
                    "event": "nft.unauthorized",
                    "collection": self.symbol,
                    "action": action,
                    "caller": short_address(caller_norm),
                }
            )
            raise UnauthorizedError(
                "Caller is not the owner",
                details={"action": action, "caller": caller_norm},
            )

    def _require_recipient(self, to: str, message: str) -> str:
        if is_zero_address(to):
            raise InvalidRecipientError(message)
        return normalize_address(to)

    def _require_valid_token_id(self, token_id: Any) -> None:
        if not self.is_valid_token_id(token_id):
            raise InvalidTokenIdError(
                "Token ID must be greater than 0", details={"token_id": token_id}
            )

    def _is_approved_or_owner(self, caller: str, token_id: int) -> bool:
        """Check if caller is holder, approved spender or operator for token."""
        holder = self.owners[token_id]
        return (
            caller == holder
            or self.token_approvals.get(token_id) == caller
            or self.is_approved_for_all(holder, caller)
        )

    def _transfer(
        self, caller: str, from_addr: str, to_addr: str, token_id: int
    ) -> None:
        """Internal transfer logic."""
        if is_zero_address(to_addr):
            raise InvalidRecipientError("Cannot transfer to zero address")

        to_norm = normalize_address(to_addr)
        from_norm = normalize_address(from_addr)
        caller_norm = normalize_address(caller)

        holder = self.owner_of(token_id)
        if holder != from_norm:
            raise IncorrectOwnerError(
                "Transfer from incorrect owner",
                details={"token_id": token_id, "from": from_norm},
            )

        if not self._is_approved_or_owner(caller_norm, token_id):
            raise UnauthorizedError(
                "Caller is not token owner or approved",
                details={"token_id": token_id, "caller": caller_norm},
            )

        self.token_approvals.pop(token_id, None)
        self._decrement_balance(from_norm)
        self.balances[to_norm] = self.balances.get(to_norm, 0) + 1
        self.owners[token_id] = to_norm

        self._emit("Transfer", from_address=from_norm, to_address=to_norm, token_id=token_id)

        logger.debug(
            "NFT transfer",
            extra={
                "event": "nft.transfer",
                "collection": self.symbol,
                "token_id": token_id,
                "from": short_address(from_norm),
                "to": short_address(to_norm),
            }
        )

    def _mint(self, to: str, token_id: int) -> None:
        self.owners[token_id] = to
        self.balances[to] = self.balances.get(to, 0) + 1
        self.supply += 1

        self._emit("Transfer", from_address=ZERO_ADDRESS, to_address=to, token_id=token_id)
        self._emit("TokenMinted", to_address=to, token_id=token_id)

    def _decrement_balance(self, account: str) -> None:
        remaining = self.balances.get(account, 0) - 1
        if remaining > 0:
            self.balances[account] = remaining
        else:
            self.balances.pop(account, None)

    def _emit(self, event_type: str, **fields: Any) -> None:
        self.events.append(NFTEvent(event_type=event_type, **fields))

    # ==================== Consistency ====================

    def verify_consistency(self) -> dict[str, Any]:
        """
        Verify internal consistency of the ledger.

        Checks:
        1. Stored supply matches the number of existing tokens
        2. Supply never exceeds max supply
        3. Stored balances match per-account token counts
        4. No token is owned by the zero address or has an invalid id
        5. No approval refers to a token that does not exist

        Returns:
            Dictionary with verification results and any discrepancies found
        """
        counted: dict[str, int] = {}
        zero_owner_tokens = []
        invalid_token_ids = []
        for token_id, holder in self.owners.items():
            counted[holder] = counted.get(holder, 0) + 1
            if is_zero_address(holder):
                zero_owner_tokens.append(token_id)
            if not self.is_valid_token_id(token_id):
                invalid_token_ids.append(token_id)

        stored = {account: count for account, count in self.balances.items() if count}
        balance_mismatches = sorted(
            account
            for account in set(stored) | set(counted)
            if stored.get(account, 0) != counted.get(account, 0)
        )
        stale_approvals = sorted(
            token_id for token_id in self.token_approvals if token_id not in self.owners
        )

        supply_mismatch = self.supply != len(self.owners)
        exceeds_max_supply = self.supply > self.max_supply

        return {
            "is_consistent": not (
                supply_mismatch
                or exceeds_max_supply
                or balance_mismatches
                or zero_owner_tokens
                or invalid_token_ids
                or stale_approvals
            ),
            "total_supply_stored": self.supply,
            "total_supply_actual": len(self.owners),
            "supply_mismatch": supply_mismatch,
            "exceeds_max_supply": exceeds_max_supply,
            "balance_mismatches": balance_mismatches,
            "zero_owner_tokens": zero_owner_tokens,
            "invalid_token_ids": invalid_token_ids,
            "stale_approvals": stale_approvals,
        }

    # ==================== Serialization ====================

    def to_dict(self) -> dict[str, Any]:
        """Serialize collection state to dictionary."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "max_supply": self.max_supply,
            "base_uri": self.base_uri,
            "owner": self.owner,
            "address": self.address,
            "owners": dict(self.owners),
            "balances": dict(self.balances),
            "token_approvals": dict(self.token_approvals),
            "operator_approvals": {
                k: dict(v) for k, v in self.operator_approvals.items()
            },
            "total_supply": self.supply,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NftCollection":
        """
        Deserialize collection state from dictionary.

        Addresses are normalized and balances are recounted from owners;
        stored balances are ignored.

        Raises:
            InvalidConfigurationError: If the restored ledger breaks a
                supply or ownership invariant (report in details)
        """
        collection = cls(
            name=data["name"],
            symbol=data["symbol"],
            max_supply=data["max_supply"],
            base_uri=data["base_uri"],
            owner=data["owner"],
            address=data.get("address", ""),
        )
        collection.owners = {
            int(k): normalize_address(v) for k, v in data.get("owners", {}).items()
        }
        for holder in collection.owners.values():
            collection.balances[holder] = collection.balances.get(holder, 0) + 1
        collection.token_approvals = {
            int(k): normalize_address(v)
            for k, v in data.get("token_approvals", {}).items()
        }
        collection.operator_approvals = {
            normalize_address(k): {
                normalize_address(operator): bool(approved)
                for operator, approved in v.items()
            }
            for k, v in data.get("operator_approvals", {}).items()
        }
        collection.supply = len(collection.owners)

        report = collection.verify_consistency()
        if not report["is_consistent"]:
            raise InvalidConfigurationError(
                "Restored collection state is inconsistent", details=report
            )
        return collection


class NftCollectionFactory:
    """Factory for deploying NFT collections."""

    def __init__(
        self,
        settings: Settings | None = None,
        contract_store: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        """
        Initialize the factory.

        Args:
            settings: Defaults for new collections (read from NFT_* env if omitted)
            contract_store: Optional backing mapping of persisted contract records
        """
        self.settings = settings or load_settings()
        self.contract_store = contract_store
        self.deployed_collections: dict[str, NftCollection] = {}
        self._nonce = 0

    def create_collection(
        self,
        creator: str,
        name: str,
        symbol: str,
        base_uri: str,
        max_supply: int | None = None,
    ) -> NftCollection:
        """
        Deploy a new collection owned by creator.

        Args:
            creator: Collection owner
            name: Collection name
            symbol: Collection symbol
            base_uri: Base URI for metadata
            max_supply: Maximum supply (settings default if omitted)

        Returns:
            Deployed NftCollection instance
        """
        if not name:
            raise InvalidConfigurationError("Collection name cannot be empty")
        if not symbol:
            raise InvalidConfigurationError("Collection symbol cannot be empty")

        if max_supply is None:
            max_supply = self.settings.default_max_supply

        creator_norm = normalize_address(creator)
        addr_input = f"{creator_norm}:{name}:{symbol}:{self._nonce}".encode()
        address = f"0x{hashlib.sha3_256(addr_input).digest()[-20:].hex()}"

        collection = NftCollection(
            name=name,
            symbol=symbol,
            max_supply=max_supply,
            base_uri=base_uri,
            owner=creator_norm,
            address=address,
        )
        self._nonce += 1

        self.deployed_collections[collection.address] = collection
        self.persist(collection)

        logger.info(
            "NFT collection created",
            extra={
                "event": "nft.collection_created",
                "address": collection.address,
                "collection_name": name,
                "collection": symbol,
                "max_supply": max_supply,
                "creator": short_address(creator_norm),
            }
        )

        return collection

    def persist(self, collection: NftCollection) -> None:
        """
        Write a collection's current state to the backing store, if any.

        Only create_collection persists automatically. Mints, burns and
        transfers go straight to the collection, so call persist after
        them to refresh the stored record.
        """
        if self.contract_store is None:
            return
        self.contract_store[collection.address.upper()] = {
            "type": CONTRACT_TYPE,
            "address": collection.address,
            "creator": collection.owner,
            "data": collection.to_dict(),
            "updated_at": time.time(),
        }

    def get_collection(self, address: str) -> NftCollection | None:
        """Get a deployed collection by address."""
        key = address.lower()
        if key in self.deployed_collections:
            return self.deployed_collections[key]

        if self.contract_store is not None:
            record = self.contract_store.get(address.upper())
            if record and record.get("type") == CONTRACT_TYPE:
                collection = NftCollection.from_dict(record["data"])
                self.deployed_collections[key] = collection
                return collection

        return None

    def list_collections(self) -> list[dict[str, Any]]:
        """List all deployed collections."""
        return [
            {
                "address": addr,
                "name": coll.name,
                "symbol": coll.symbol,
                "total_supply": coll.total_supply(),
                "max_supply": coll.max_supply,
                "owner": coll.owner,
            }
            for addr, coll in self.deployed_collections.items()
        ]
