"""Wire-level identifiers and amounts.

Accounts and assets are 0x-prefixed 20-byte hex addresses. Inside the
pool they are always lowercase. Amounts cross the HTTP boundary as
decimal strings because uint256 values do not fit in a JSON number.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from dex.safe_int import is_uint256

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)


def validate_uint256(value: Any) -> str:
    """Canonicalize a JSON amount to a decimal string.

    Accepts ints and ASCII digit strings; leading zeros are dropped.

    Raises:
        ValueError: For any other type (bool included), a sign or a
            fraction, or a value outside 0..2^256-1
    """
    if isinstance(value, str) and value.isascii() and value.isdigit():
        amount = int(value)
    elif type(value) is int:
        amount = value
    else:
        raise ValueError(f"Amount must be a decimal string or int, got {value!r}")

    if not is_uint256(amount):
        raise ValueError(f"Amount out of uint256 range: {value}")
    return str(amount)


Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def is_valid_address(address: Any) -> bool:
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Raises:
        ValueError: If validate is set and the result is not an address
    """
    normalized = "0x" + address.lower().removeprefix("0x")
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized
