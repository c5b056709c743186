"""
ronin.rest API client with transient-failure retry and pagination.

This module provides a centralized client for all index service interactions,
handling the identifying User-Agent header, exponential backoff on timeouts,
connection errors, 5xx and 429 responses, and offset pagination of NFT lists.
"""

import random
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .errors import ParseError, TransportError
from .models import NFT_ENDPOINTS, SEMI_FUNGIBLE_SOURCES, NonFungibleCategory, SemiFungibleCategory

DEFAULT_HOST = "https://ronin.rest"
DEFAULT_USER_AGENT = "ronin/wallet-export0.1.0 See: https://github.com/wehmoen/wallet-export"
DEFAULT_TIMEOUT = 30.0  # seconds

# NFT list page size; a full page means more may follow
PAGE_SIZE = 25

# Retry configuration
DEFAULT_MAX_RETRIES = 25
DEFAULT_MIN_INTERVAL = 1.0  # seconds
DEFAULT_MAX_INTERVAL = 15.0  # seconds
DEFAULT_EXPONENT = 2


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff configuration applied to every outbound request."""

    max_retries: int = DEFAULT_MAX_RETRIES
    min_interval: float = DEFAULT_MIN_INTERVAL
    max_interval: float = DEFAULT_MAX_INTERVAL
    exponent: float = DEFAULT_EXPONENT
    jitter: float = 0.0  # ±fraction of the delay

    def delay_for(self, attempt: int) -> float:
        """
        Get the wait before retrying after a failed attempt.

        Args:
            attempt: Zero-based index of the attempt that just failed

        Returns:
            min(max_interval, min_interval * exponent ** attempt), jittered
        """
        delay = min(self.max_interval, self.min_interval * self.exponent**attempt)
        if self.jitter:
            jitter_range = delay * self.jitter
            delay += random.uniform(-jitter_range, jitter_range)
        return max(delay, 0.0)


class RoninRestClient:
    """
    Centralized ronin.rest client with automatic transient retry handling.

    The client keeps no per-request state, so one instance can be shared
    across categories and addresses.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        retry_policy: Optional[RetryPolicy] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            host: Index service base URL
            retry_policy: Backoff configuration (defaults to RetryPolicy())
            user_agent: Identifying User-Agent sent with every request
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.host = host.rstrip("/")
        self.retry_policy = retry_policy or RetryPolicy()
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()

    def _wait(self, attempt: int) -> None:
        time.sleep(self.retry_policy.delay_for(attempt))

    def send(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        GET a URL, retrying transient failures according to the retry policy.

        Args:
            url: Absolute request URL
            params: Optional query parameters

        Returns:
            The successful response

        Raises:
            TransportError: On a non-transient HTTP error, or once retries
                are exhausted
        """
        max_retries = self.retry_policy.max_retries
        headers = {"User-Agent": self.user_agent}

        for attempt in range(max_retries + 1):
            try:
                response = self.session.get(
                    url, params=params, headers=headers, timeout=self.timeout
                )
            except (
                requests.Timeout,
                requests.ConnectionError,
                requests.exceptions.ChunkedEncodingError,
            ) as e:
                if attempt < max_retries:
                    self._wait(attempt)
                    continue
                raise TransportError(f"Request failed: {e}") from e
            except requests.RequestException as e:
                raise TransportError(f"Request failed: {e}") from e

            if response.status_code == 429 or response.status_code >= 500:
                if attempt < max_retries:
                    self._wait(attempt)
                    continue
                if response.status_code == 429:
                    raise TransportError(
                        "Rate limit exceeded and max retries reached",
                        status_code=429,
                    )
                raise TransportError(
                    f"Server error: {response.status_code}",
                    status_code=response.status_code,
                )

            if response.status_code >= 400:
                raise TransportError(
                    f"Client error: {response.status_code} for {url}",
                    status_code=response.status_code,
                )

            return response

        raise TransportError("Max retries exceeded")

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a path on the index host and decode the JSON body.

        Raises:
            TransportError: See send()
            ParseError: If the body is not valid JSON
        """
        url = f"{self.host}/{path.lstrip('/')}"
        response = self.send(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Malformed JSON from {url}") from e

    def list_nft_ids(self, category: NonFungibleCategory, address: str) -> List[str]:
        """
        Get all NFT ids of one category owned by a wallet.

        Pages are requested at offsets 0, 25, 50, ... until a page holds
        fewer than PAGE_SIZE entries.

        Args:
            category: Axie, land or item
            address: Canonical 0x wallet address

        Returns:
            All ids in index order

        Raises:
            ParseError: If a page lacks the category array
        """
        field_name = NFT_ENDPOINTS[category]
        path = f"ronin/nfts/{field_name}/{address}"

        all_ids: List[str] = []
        offset = 0

        while True:
            data = self.get_json(path, params={"offset": offset})
            items = data.get(field_name) if isinstance(data, dict) else None
            if not isinstance(items, list):
                raise ParseError(f"Response for {path} has no '{field_name}' list")

            all_ids.extend(str(item).replace('"', "") for item in items)

            if len(items) != PAGE_SIZE:
                break

            offset += PAGE_SIZE

        return all_ids

    def get_token_catalog(self, category: SemiFungibleCategory) -> Dict[str, Any]:
        """
        Get the full rune or charm catalog document.

        Raises:
            ParseError: If the document is not a JSON object
        """
        path = SEMI_FUNGIBLE_SOURCES[category].catalog_path
        data = self.get_json(path)
        if not isinstance(data, dict):
            raise ParseError(f"Response for {path} is not an object")
        return data
