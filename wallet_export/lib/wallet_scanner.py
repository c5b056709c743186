"""
Wallet aggregation across all Ronin asset categories.

This module combines the index client, the token resolver and the chain
reader into one WalletSnapshot per address.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any, Callable, Dict, List, NamedTuple

from .chain_reader import ChainReader
from .models import (
    OUTPUT_KEYS,
    FungibleBalance,
    NonFungibleCategory,
    SemiFungibleCategory,
    WalletSnapshot,
)
from .ronin_client import RoninRestClient
from .token_resolver import list_balances, project_balances


class FungibleToken(NamedTuple):
    symbol: str
    name: str
    contract: str
    decimals: int


NATIVE_TOKEN = FungibleToken(symbol="RON", name="Ronin", contract="NATIVE", decimals=18)

# ERC-20 tokens queried for every wallet
FUNGIBLE_TOKENS = [
    FungibleToken("WETH", "Wrapped Ether", "0xc99a6a985ed2cac1ef41640596c5a5f9f4e19ef5", 18),
    FungibleToken("AXS", "Axie Infinity Shard", "0x97a9107c1793bc407d6f527b77e7fff4d812bece", 18),
    FungibleToken("SLP", "Smooth Love Potion", "0xa8754b9fa15fc18bb59458815510e40a12cd2014", 0),
    FungibleToken("USDC", "USD Coin", "0x0b7007c13325c48911f73a2dad5fa5dcbf808adc", 6),
]


def format_quantity(raw_balance: int, decimals: int) -> str:
    """
    Format balance with full precision, trimming trailing zeros.

    Examples:
        format_quantity(1000000, 6) -> "1"
        format_quantity(1500000, 6) -> "1.5"
        format_quantity(1234567890123456789, 18) -> "1.234567890123456789"
    """
    if raw_balance == 0:
        return "0"

    if decimals == 0:
        return str(raw_balance)

    balance = Decimal(raw_balance) / Decimal(10**decimals)
    formatted = format(balance, "f")

    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")

    return formatted


def _fungible_balance(token: FungibleToken, raw_balance: int) -> FungibleBalance:
    return FungibleBalance(
        symbol=token.symbol,
        name=token.name,
        asset_address=token.contract,
        raw_balance=raw_balance,
        decimals=token.decimals,
        quantity=format_quantity(raw_balance, token.decimals),
    )


def list_fungible(reader: ChainReader, address: str) -> List[FungibleBalance]:
    """
    Get the wallet's RON and ERC-20 balances.

    Zero balances are omitted.

    Raises:
        ChainQueryError: If any balance query fails
    """
    balances: List[FungibleBalance] = []

    native = reader.native_balance(address)
    if native > 0:
        balances.append(_fungible_balance(NATIVE_TOKEN, native))

    for token in FUNGIBLE_TOKENS:
        raw_balance = reader.erc20_balance_of(token.contract, address)
        if raw_balance > 0:
            balances.append(_fungible_balance(token, raw_balance))

    return balances


class WalletScanner:
    """
    Builds complete wallet snapshots.

    Every category fetch must succeed for a snapshot to be produced; the
    first error propagates to the caller.
    """

    def __init__(self, client: RoninRestClient, reader: ChainReader, max_workers: int = 1):
        """
        Initialize the scanner.

        Args:
            client: Index service client
            reader: Chain reader for fungible and ERC-1155 balances
            max_workers: Concurrent category fetches (1 = sequential)
        """
        self.client = client
        self.reader = reader
        self.max_workers = max_workers

    def _fetches(self, address: str) -> Dict[Any, Callable[[], Any]]:
        fetches: Dict[Any, Callable[[], Any]] = {
            "fungible": lambda: list_fungible(self.reader, address),
        }
        for nft in NonFungibleCategory:
            fetches[nft] = lambda nft=nft: self.client.list_nft_ids(nft, address)
        for token in SemiFungibleCategory:
            fetches[token] = lambda token=token: list_balances(
                self.client, self.reader, token, address, max_workers=self.max_workers
            )
        return fetches

    def build_snapshot(self, address: str) -> WalletSnapshot:
        """
        Fetch every category for a wallet and assemble its snapshot.

        Args:
            address: Canonical 0x wallet address

        Returns:
            WalletSnapshot with every category present

        Raises:
            WalletExportError: If any category fetch fails
        """
        fetches = self._fetches(address)

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as ex:
                futures = {key: ex.submit(fetch) for key, fetch in fetches.items()}
                results = {key: future.result() for key, future in futures.items()}
        else:
            results = {key: fetch() for key, fetch in fetches.items()}

        fields: Dict[str, Any] = {"wallet": address, "fungible": tuple(results["fungible"])}

        for nft in NonFungibleCategory:
            fields[OUTPUT_KEYS[nft]] = tuple(results[nft])

        for token in SemiFungibleCategory:
            pairs, total = project_balances(results[token])
            fields[OUTPUT_KEYS[token]] = tuple(pairs)
            fields[f"{token.value}_total"] = total

        return WalletSnapshot(**fields)
