"""
Shared identifier and amount types.
"""

import re
from enum import Enum


# Type aliases
Address = str  # 20-byte hex string (0x...)
Amount = int  # Non-negative integer (arbitrary precision, checked against uint widths)

# Null identity; never a valid recipient
NULL_ADDRESS = "0x" + "00" * 20

MAX_UINT112 = (1 << 112) - 1
MAX_UINT256 = (1 << 256) - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Side(Enum):
    """Which reserve of the bound pair an amount belongs to."""
    A = "A"
    B = "B"

    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


def require_address(value: object, *, name: str) -> Address:
    """
    Validate an address and return it in canonical (lower-case) form.

    Raises:
        TypeError: If value is not a string
        ValueError: If value is not 0x followed by 40 hex chars
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not _ADDRESS_RE.fullmatch(value):
        raise ValueError(f"{name} must be a 20-byte 0x-prefixed hex address: {value!r}")
    return value.lower()


def is_null_address(value: Address) -> bool:
    return value.lower() == NULL_ADDRESS
