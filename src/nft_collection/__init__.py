"""
NFT Collection - a capped ERC721-style token registry.
"""

from .addresses import ZERO_ADDRESS, is_zero_address, normalize_address
from .config import Settings, load_settings
from .contracts import NFTEvent, NftCollection, NftCollectionFactory, function_selector
from .exceptions import (
    BatchSupplyExceededError,
    CollectionError,
    IncorrectOwnerError,
    InvalidConfigurationError,
    InvalidRecipientError,
    InvalidTokenIdError,
    SelfApprovalError,
    SettingsError,
    SupplyExceededError,
    TokenAlreadyExistsError,
    TokenNotFoundError,
    UnauthorizedError,
    UnknownFunctionError,
)

__version__ = "0.1.0"

__all__ = [
    "NftCollection",
    "NftCollectionFactory",
    "NFTEvent",
    "function_selector",
    "ZERO_ADDRESS",
    "is_zero_address",
    "normalize_address",
    "Settings",
    "load_settings",
    "CollectionError",
    "InvalidConfigurationError",
    "SettingsError",
    "UnauthorizedError",
    "SelfApprovalError",
    "InvalidRecipientError",
    "InvalidTokenIdError",
    "TokenAlreadyExistsError",
    "TokenNotFoundError",
    "IncorrectOwnerError",
    "SupplyExceededError",
    "BatchSupplyExceededError",
    "UnknownFunctionError",
]
