"""
Rune and charm balance resolution.

Balances are found in two steps: the index catalog lists every token
definition (discover_tokens), then the wallet's balance of each candidate
is read from the category's ERC-1155 contract (resolve_balances).
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Tuple

from .chain_reader import ChainReader
from .errors import ParseError
from .models import ERC1155, SEMI_FUNGIBLE_SOURCES, SemiFungibleCategory, TokenDescriptor
from .ronin_client import RoninRestClient


def _parse_token_id(raw: Any) -> int:
    if raw is None:
        return 0
    if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
        return raw
    if isinstance(raw, str) and raw.isascii() and raw.isdigit():
        return int(raw)
    raise ParseError(f"Invalid tokenId: {raw!r}")


def discover_tokens(
    category: SemiFungibleCategory,
    catalog: Mapping[str, Any],
) -> Dict[int, TokenDescriptor]:
    """
    Build zero-balance descriptors for the catalog's on-contract tokens.

    Only ERC-1155 entries whose tokenAddress matches the category contract
    (case-insensitively) and whose tokenId is non-zero are kept. A repeated
    tokenId replaces the earlier entry.

    Args:
        category: Rune or charm
        catalog: Decoded listRunes/listCharms document

    Returns:
        Descriptors keyed by token id

    Raises:
        ParseError: If the catalog or a matching entry is malformed
    """
    contract = SEMI_FUNGIBLE_SOURCES[category].contract.lower()
    entries = catalog.get("_items")
    if not isinstance(entries, list):
        raise ParseError(f"{category.value} catalog has no '_items' list")

    tokens: Dict[int, TokenDescriptor] = {}

    for entry in entries:
        inner = entry.get("item") if isinstance(entry, dict) else None
        if not isinstance(inner, dict):
            raise ParseError(f"{category.value} catalog entry has no 'item' object")

        if inner.get("tokenStandard") != ERC1155:
            continue
        if str(inner.get("tokenAddress") or "").lower() != contract:
            continue

        token_id = _parse_token_id(inner.get("tokenId"))
        if token_id <= 0:
            continue

        try:
            tokens[token_id] = TokenDescriptor(
                category=category,
                token_id=token_id,
                name=inner["name"],
                id=inner["id"],
                item_category=inner["category"],
                rarity=inner["rarity"],
                description=inner["description"],
                image_url=inner["imageUrl"],
            )
        except KeyError as e:
            raise ParseError(f"{category.value} token {token_id} is missing {e}") from e

    return tokens


def resolve_balances(
    descriptors: Mapping[int, TokenDescriptor],
    reader: ChainReader,
    contract: str,
    address: str,
    max_workers: int = 1,
) -> Dict[int, TokenDescriptor]:
    """
    Read the wallet's balance of every descriptor from the contract.

    Queries are independent; with max_workers > 1 they run on a thread pool.
    The first failed query aborts the resolution.

    Returns:
        New descriptors with balances set, keyed by token id

    Raises:
        ChainQueryError: If any balance query fails
    """
    token_ids = list(descriptors)

    def query(token_id: int) -> int:
        return reader.erc1155_balance_of(contract, address, token_id)

    if max_workers > 1 and len(token_ids) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            balances = list(ex.map(query, token_ids))
    else:
        balances = [query(token_id) for token_id in token_ids]

    return {
        token_id: replace(descriptors[token_id], balance=balance)
        for token_id, balance in zip(token_ids, balances)
    }


def list_balances(
    client: RoninRestClient,
    reader: ChainReader,
    category: SemiFungibleCategory,
    address: str,
    max_workers: int = 1,
) -> Dict[int, TokenDescriptor]:
    """
    Discover a category's tokens and resolve the wallet's balance of each.

    Args:
        client: Index service client
        reader: Chain reader
        category: Rune or charm
        address: Canonical 0x wallet address
        max_workers: Concurrent on-chain queries

    Returns:
        Resolved descriptors keyed by token id (zero balances included)
    """
    catalog = client.get_token_catalog(category)
    candidates = discover_tokens(category, catalog)
    contract = SEMI_FUNGIBLE_SOURCES[category].contract
    return resolve_balances(candidates, reader, contract, address, max_workers=max_workers)


def project_balances(
    descriptors: Mapping[int, TokenDescriptor],
) -> Tuple[List[Tuple[str, str]], int]:
    """
    Keep held tokens and project them to (id, balance) pairs.

    Returns:
        Tuple of (pairs ordered by token id, summed balance)
    """
    pairs: List[Tuple[str, str]] = []
    total = 0

    for token_id in sorted(descriptors):
        descriptor = descriptors[token_id]
        if descriptor.balance > 0:
            id_, balance = descriptor.minimal()
            pairs.append((id_, balance))
            total += descriptor.balance

    return pairs, total
