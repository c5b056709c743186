"""
Unit tests for the chain reader.

Tests follow the Given/When/Then pattern for clarity.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest
import requests
from web3.exceptions import ContractLogicError

from wallet_export.lib.chain_reader import ERC1155_BALANCE_ABI, ERC20_BALANCE_ABI, ChainReader
from wallet_export.lib.errors import ChainQueryError

RUNE_CONTRACT = "0xc25970724f032af21d801978c73653c440cf787c"
SLP_CONTRACT = "0xa8754b9fa15fc18bb59458815510e40a12cd2014"


class TestErc1155BalanceOf:
    """Tests for ERC-1155 balance queries."""

    def test_returns_balance_from_contract(self, sample_wallet_address):
        """
        Given a contract returning 7 for balanceOf
        When querying a token balance
        Then 7 should be returned and the owner checksummed
        """
        # Given
        w3 = MagicMock()
        balance_of = w3.eth.contract.return_value.functions.balanceOf
        balance_of.return_value.call.return_value = 7
        reader = ChainReader(web3=w3)

        # When
        balance = reader.erc1155_balance_of(RUNE_CONTRACT, sample_wallet_address, 42)

        # Then
        assert balance == 7
        owner, token_id = balance_of.call_args.args
        assert owner.lower() == sample_wallet_address
        assert owner != sample_wallet_address  # checksummed
        assert token_id == 42
        assert w3.eth.contract.call_args.kwargs["abi"] == ERC1155_BALANCE_ABI

    def test_reuses_contract_instances(self, sample_wallet_address):
        """
        Given a reader
        When querying the same contract twice
        Then the contract should be built once
        """
        # Given
        w3 = MagicMock()
        w3.eth.contract.return_value.functions.balanceOf.return_value.call.return_value = 0
        reader = ChainReader(web3=w3)

        # When
        reader.erc1155_balance_of(RUNE_CONTRACT, sample_wallet_address, 1)
        reader.erc1155_balance_of(RUNE_CONTRACT.upper().replace("0X", "0x"), sample_wallet_address, 2)

        # Then
        assert w3.eth.contract.call_count == 1

    @pytest.mark.parametrize(
        "failure",
        [
            ContractLogicError("execution reverted"),
            requests.ConnectionError("node unreachable"),
        ],
    )
    def test_wraps_failures_in_chain_query_error(self, sample_wallet_address, failure):
        """
        Given a contract call that reverts or cannot reach the node
        When querying a token balance
        Then ChainQueryError should be raised
        """
        # Given
        w3 = MagicMock()
        w3.eth.contract.return_value.functions.balanceOf.return_value.call.side_effect = failure
        reader = ChainReader(web3=w3)

        # When / Then
        with pytest.raises(ChainQueryError, match="balanceOf"):
            reader.erc1155_balance_of(RUNE_CONTRACT, sample_wallet_address, 1)


    def test_concurrent_queries_build_contract_once(self, sample_wallet_address):
        """
        Given a reader shared by several threads
        When they query the same contract at once
        Then the contract should be built a single time
        """
        # Given
        w3 = MagicMock()

        def slow_contract(**kwargs):
            time.sleep(0.01)
            contract = MagicMock()
            contract.functions.balanceOf.return_value.call.return_value = 1
            return contract

        w3.eth.contract.side_effect = slow_contract
        reader = ChainReader(web3=w3)

        # When
        with ThreadPoolExecutor(max_workers=8) as ex:
            balances = list(
                ex.map(
                    lambda token_id: reader.erc1155_balance_of(
                        RUNE_CONTRACT, sample_wallet_address, token_id
                    ),
                    range(16),
                )
            )

        # Then
        assert balances == [1] * 16
        assert w3.eth.contract.call_count == 1


class TestFungibleQueries:
    """Tests for ERC-20 and native balance queries."""

    def test_erc20_balance_uses_erc20_abi(self, sample_wallet_address):
        """
        Given an ERC-20 contract returning 250
        When querying the wallet's balance
        Then 250 should be returned
        """
        # Given
        w3 = MagicMock()
        w3.eth.contract.return_value.functions.balanceOf.return_value.call.return_value = 250
        reader = ChainReader(web3=w3)

        # When
        balance = reader.erc20_balance_of(SLP_CONTRACT, sample_wallet_address)

        # Then
        assert balance == 250
        assert w3.eth.contract.call_args.kwargs["abi"] == ERC20_BALANCE_ABI

    def test_native_balance(self, sample_wallet_address):
        """
        Given a node reporting 10**18 wei
        When querying the RON balance
        Then 10**18 should be returned
        """
        # Given
        w3 = MagicMock()
        w3.eth.get_balance.return_value = 10**18
        reader = ChainReader(web3=w3)

        # When / Then
        assert reader.native_balance(sample_wallet_address) == 10**18

    def test_native_balance_failure(self, sample_wallet_address):
        """
        Given a node that times out
        When querying the RON balance
        Then ChainQueryError should be raised
        """
        # Given
        w3 = MagicMock()
        w3.eth.get_balance.side_effect = requests.Timeout("timed out")
        reader = ChainReader(web3=w3)

        # When / Then
        with pytest.raises(ChainQueryError, match="eth_getBalance"):
            reader.native_balance(sample_wallet_address)
