"""Address and amount types shared by the API models and deployment files.

Amounts cross the wire as decimal strings so 18-decimal token values keep
full precision in JSON clients.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from samm.safe_int import UINT256_MAX

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string to a canonical uint256 string.

    Raises:
        ValueError: On bools, non-numeric strings, negatives and values above 2^256-1
    """
    if isinstance(value, str):
        try:
            amount = int(value, 10)
        except ValueError as err:
            raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err
    elif isinstance(value, int) and not isinstance(value, bool):
        amount = value
    else:
        raise ValueError(f"Amount must be a string or int, got {type(value).__name__}")

    if not 0 <= amount <= UINT256_MAX:
        raise ValueError(f"Amount out of uint256 range: {value}")
    return str(amount)


Address = Annotated[str, Field(pattern=_ADDRESS_RE.pattern)]

Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="Token amount in base units, as a decimal string"),
]


def is_valid_address(address: str) -> bool:
    """True for a 0x-prefixed, 20-byte hex address (any case)."""
    return isinstance(address, str) and _ADDRESS_RE.match(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Token and shard lookups key on the normalized form.
    """
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized
