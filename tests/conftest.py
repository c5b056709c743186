"""
Pytest configuration and shared fixtures for wallet-export tests.
"""

import pytest

from wallet_export.lib.ronin_client import RetryPolicy

RUNE_CONTRACT = "0xc25970724f032af21d801978c73653c440cf787c"
CHARM_CONTRACT = "0x814a9c959a3ef6ca44b5e2349e3bba9845393947"


def make_catalog_item(
    token_id,
    id_,
    token_address=RUNE_CONTRACT,
    token_standard="ERC1155",
    name=None,
):
    """Build one listRunes/listCharms `_items` entry."""
    return {
        "item": {
            "tokenStandard": token_standard,
            "tokenAddress": token_address,
            "tokenId": None if token_id is None else str(token_id),
            "name": name or id_.replace("_", " ").title(),
            "id": id_,
            "category": "Rune",
            "rarity": "Common",
            "description": "Test token",
            "imageUrl": f"https://cdn.example.com/{id_}.png",
        }
    }


@pytest.fixture
def sample_ronin_address():
    """Sample Ronin wallet address in ronin: form."""
    return "ronin:3759468f9fd589665c8affbe52414ef77f863f72"


@pytest.fixture
def sample_wallet_address():
    """Sample Ronin wallet address in canonical 0x form."""
    return "0x3759468f9fd589665c8affbe52414ef77f863f72"


@pytest.fixture
def fast_retry_policy():
    """Retry policy with no waiting between attempts."""
    return RetryPolicy(max_retries=3, min_interval=0, max_interval=0)
