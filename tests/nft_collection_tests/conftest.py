import sys
from pathlib import Path

import pytest

# Make the src layout importable without an editable install.
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root / "src"))

from nft_collection import NftCollection  # noqa: E402

OWNER = "0x" + "11" * 20
USER1 = "0x" + "22" * 20
USER2 = "0x" + "33" * 20
USER3 = "0x" + "44" * 20

BASE_URI = "https://metadata.example.com/"


@pytest.fixture
def accounts():
    """Collection owner and three unprivileged users."""
    return {"owner": OWNER, "user1": USER1, "user2": USER2, "user3": USER3}


@pytest.fixture
def deploy():
    """Deploy a collection, defaulting to MyNFT/MNFT with max supply 10."""

    def _deploy(
        name: str = "MyNFT",
        symbol: str = "MNFT",
        max_supply: int = 10,
        base_uri: str = BASE_URI,
        owner: str = OWNER,
    ) -> NftCollection:
        return NftCollection(
            name=name,
            symbol=symbol,
            max_supply=max_supply,
            base_uri=base_uri,
            owner=owner,
        )

    return _deploy


@pytest.fixture
def contract(deploy):
    """Freshly deployed default collection."""
    return deploy()
