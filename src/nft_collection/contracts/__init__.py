"""
NFT collection contracts.

- NftCollection: capped, owner-minted ERC721-style collection
- NftCollectionFactory: deploys and tracks collections
"""

from .nft_collection import (
    NFT_COLLECTION_FUNCTIONS,
    NFTEvent,
    NftCollection,
    NftCollectionFactory,
    function_selector,
)

__all__ = [
    "NftCollection",
    "NftCollectionFactory",
    "NFTEvent",
    "NFT_COLLECTION_FUNCTIONS",
    "function_selector",
]
