"""
Data models for Ronin wallet exports.

This module defines the asset categories and their static endpoint/contract
table, the token descriptors built from the index catalog, and the
WalletSnapshot aggregate that is serialized to the output document.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Tuple


class NonFungibleCategory(Enum):
    """Non-fungible asset kinds listed by the index service."""

    AXIE = "axie"
    LAND = "land"
    ITEM = "item"


class SemiFungibleCategory(Enum):
    """ERC-1155 token kinds whose balances are read on-chain."""

    RUNE = "rune"
    CHARM = "charm"


class TokenSource(NamedTuple):
    """Where a semi-fungible category is catalogued and held."""

    catalog_path: str
    contract: str


# Index path segment (and response field name) per non-fungible category
NFT_ENDPOINTS = {
    NonFungibleCategory.AXIE: "axie",
    NonFungibleCategory.LAND: "land",
    NonFungibleCategory.ITEM: "item",
}

SEMI_FUNGIBLE_SOURCES = {
    SemiFungibleCategory.RUNE: TokenSource(
        catalog_path="origin/game/listRunes",
        contract="0xc25970724f032af21d801978c73653c440cf787c",
    ),
    SemiFungibleCategory.CHARM: TokenSource(
        catalog_path="origin/game/listCharms",
        contract="0x814a9c959a3ef6ca44b5e2349e3bba9845393947",
    ),
}

# Output document keys
OUTPUT_KEYS = {
    NonFungibleCategory.AXIE: "axies",
    NonFungibleCategory.LAND: "lands",
    NonFungibleCategory.ITEM: "items",
    SemiFungibleCategory.RUNE: "runes",
    SemiFungibleCategory.CHARM: "charms",
}

ERC1155 = "ERC1155"


@dataclass(frozen=True)
class TokenDescriptor:
    """Represents one rune or charm definition and the wallet's balance of it."""

    category: SemiFungibleCategory
    token_id: int
    name: str
    id: str  # Catalog identifier, e.g. "ecf_rune_s8_nft"
    item_category: str
    rarity: str
    description: str
    image_url: str
    balance: int = 0

    def minimal(self) -> List[str]:
        """Two-field output form: [id, balance]."""
        return [self.id, str(self.balance)]


@dataclass(frozen=True)
class FungibleBalance:
    """Represents a native RON or ERC-20 balance."""

    symbol: str
    name: str
    asset_address: str  # "NATIVE" for RON, token contract otherwise
    raw_balance: int
    decimals: int
    quantity: str  # Full precision, trailing zeros trimmed

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the output document form."""
        return {
            "symbol": self.symbol,
            "name": self.name,
            "asset_address": self.asset_address,
            "quantity": self.quantity,
            "raw_balance": str(self.raw_balance),
        }


@dataclass(frozen=True)
class WalletSnapshot:
    """
    Complete holdings of one wallet.

    Every category is always present; a category with no holdings is an
    empty tuple. Totals are kept for progress reporting only and are not
    part of the output document.
    """

    wallet: str
    fungible: Tuple[FungibleBalance, ...] = ()
    axies: Tuple[str, ...] = ()
    lands: Tuple[str, ...] = ()
    items: Tuple[str, ...] = ()
    runes: Tuple[Tuple[str, str], ...] = ()
    charms: Tuple[Tuple[str, str], ...] = ()
    rune_total: int = 0
    charm_total: int = 0

    def to_document(self) -> Dict[str, Any]:
        """Build the JSON-serializable wallet-balance document."""
        return {
            "wallet": self.wallet,
            "fungible": [balance.to_dict() for balance in self.fungible],
            "non_fungible": {
                "axies": list(self.axies),
                "lands": list(self.lands),
                "items": list(self.items),
                "runes": [list(pair) for pair in self.runes],
                "charms": [list(pair) for pair in self.charms],
            },
        }
