"""
Address comparison for ownership and resolver checks.

Addresses are compared on their EIP-55 checksum form, so case differences
never produce a mismatch. Missing or malformed input yields ABSENT rather
than an error: downstream logic must be able to tell "don't know yet"
apart from "known mismatch".
"""

from typing import Any

from eth_utils import is_hex_address, to_checksum_address

from .ports import AddressMatch


def normalize_address(value: Any) -> str | None:
    """
    Return the checksum form of an address, or None if it is not one.

    Mixed-case input with a wrong checksum is still accepted; only the
    hex digits matter.
    """
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    if not is_hex_address(candidate):
        return None
    return to_checksum_address(candidate)


def matches(a: Any, b: Any) -> AddressMatch:
    """Compare two addresses case-insensitively."""
    left = normalize_address(a)
    right = normalize_address(b)
    if left is None or right is None:
        return AddressMatch.ABSENT
    return AddressMatch.MATCHING if left == right else AddressMatch.MISMATCHING
