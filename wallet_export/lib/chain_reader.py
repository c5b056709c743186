"""
Read-only Ronin chain access through web3.

Wraps a Web3 HTTP provider with the minimal ERC-20 and ERC-1155 ABIs needed
for balance queries. Every failure surfaces as ChainQueryError.
"""

import os
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from .errors import ChainQueryError

T = TypeVar("T")

DEFAULT_RPC_URL = os.getenv("RONIN_RPC_URL", "http://localhost:8545")
DEFAULT_RPC_TIMEOUT = 20  # seconds

ERC1155_BALANCE_ABI = [
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_id", "type": "uint256"},
        ],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_BALANCE_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class ChainReader:
    """Balance queries against a Ronin JSON-RPC endpoint."""

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_RPC_TIMEOUT,
        web3: Optional[Web3] = None,
    ):
        """
        Initialize the reader.

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout: Per-call timeout in seconds
            web3: Optional pre-built Web3 instance (overrides rpc_url)
        """
        self.rpc_url = rpc_url
        self.w3 = web3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
        self._contracts: Dict[tuple, Any] = {}
        self._contracts_lock = threading.Lock()

    def _contract(self, address: str, abi: list, kind: str) -> Any:
        key = (kind, address.lower())
        with self._contracts_lock:
            if key not in self._contracts:
                self._contracts[key] = self.w3.eth.contract(
                    address=Web3.to_checksum_address(address), abi=abi
                )
            return self._contracts[key]

    def _call(self, description: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except (Web3Exception, requests.RequestException, ValueError) as e:
            raise ChainQueryError(f"{description} failed: {e}") from e

    def erc1155_balance_of(self, contract: str, owner: str, token_id: int) -> int:
        """
        Get an ERC-1155 balance via balanceOf(owner, id).

        Raises:
            ChainQueryError: If the node is unreachable or the call reverts
        """
        token = self._contract(contract, ERC1155_BALANCE_ABI, "erc1155")
        checksummed_owner = Web3.to_checksum_address(owner)
        return int(
            self._call(
                f"balanceOf({owner}, {token_id}) on {contract}",
                lambda: token.functions.balanceOf(checksummed_owner, token_id).call(),
            )
        )

    def erc20_balance_of(self, contract: str, owner: str) -> int:
        """Get an ERC-20 balance in the token's smallest unit."""
        token = self._contract(contract, ERC20_BALANCE_ABI, "erc20")
        checksummed_owner = Web3.to_checksum_address(owner)
        return int(
            self._call(
                f"balanceOf({owner}) on {contract}",
                lambda: token.functions.balanceOf(checksummed_owner).call(),
            )
        )

    def native_balance(self, owner: str) -> int:
        """Get the RON balance in wei."""
        checksummed_owner = Web3.to_checksum_address(owner)
        return int(
            self._call(
                f"eth_getBalance({owner})",
                lambda: self.w3.eth.get_balance(checksummed_owner),
            )
        )
