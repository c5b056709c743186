"""
Ronin address helpers.

Ronin wallets display addresses as ``ronin:<hex>``; the index service and
the chain RPC both expect the standard ``0x<hex>`` form.
"""

import re

from .errors import ValidationError

RONIN_PREFIX = "ronin:"
HEX_PREFIX = "0x"

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_address(raw: str) -> str:
    """
    Convert an address to its canonical lowercase ``0x`` form.

    Args:
        raw: Address in ``ronin:`` or ``0x`` form

    Returns:
        Canonical address string. Already-canonical input is returned as is.

    Examples:
        normalize_address("ronin:3759468f9fd589665c8affbe52414ef77f863f72")
        -> "0x3759468f9fd589665c8affbe52414ef77f863f72"
    """
    address = raw.strip().lower()
    if address.startswith(RONIN_PREFIX):
        address = HEX_PREFIX + address[len(RONIN_PREFIX):]
    return address


def validate_address(raw: str) -> str:
    """
    Normalize an address and check it is a 20-byte hex account.

    Raises:
        ValidationError: If the address is malformed
    """
    address = normalize_address(raw)
    if not _ADDRESS_PATTERN.match(address):
        raise ValidationError(f"Invalid Ronin address: {raw!r}")
    return address


def to_ronin_address(address: str) -> str:
    """Render a canonical address in the ``ronin:`` display form."""
    canonical = normalize_address(address)
    if canonical.startswith(HEX_PREFIX):
        return RONIN_PREFIX + canonical[len(HEX_PREFIX):]
    return canonical
