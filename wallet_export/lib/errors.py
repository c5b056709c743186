"""
Error taxonomy for wallet exports.

Every failure raised by the library derives from WalletExportError so the
CLI can isolate one address's failure from the rest of a bulk run.
"""

from typing import Optional


class WalletExportError(Exception):
    """Base exception for wallet export failures."""

    pass


class TransportError(WalletExportError):
    """Exception raised for network failures and non-success HTTP responses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(WalletExportError):
    """Exception raised when a response body does not match the expected schema."""

    pass


class ChainQueryError(WalletExportError):
    """Exception raised when an on-chain read call fails."""

    pass


class ValidationError(WalletExportError):
    """Exception raised for malformed wallet address input."""

    pass
