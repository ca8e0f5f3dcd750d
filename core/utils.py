import re
from typing import Any, Optional, Union

HEX_RE = re.compile(r"0x[0-9a-fA-F]*")
DECIMAL_RE = re.compile(r"[0-9]+")


def hex_to_number(value: Union[str, int]) -> int:
    """'0x4a' -> 74. Ints pass through."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, int):
        return value
    value = str(value).strip()
    if not value.startswith("0x"):
        raise ValueError(f"not a 0x-prefixed hex string: {value!r}")
    return int(value, 16)


def number_to_hex(value: Optional[Union[str, int]]) -> Optional[str]:
    """74 -> '0x4a'. Hex strings pass through, None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.startswith("0x") else hex(int(value, 10))
    return hex(value)


def is_hex(value: Any) -> bool:
    return isinstance(value, str) and HEX_RE.fullmatch(value) is not None


def to_block_number(value: Any) -> Optional[Union[str, int]]:
    """
    Normalize a block parameter.

    Returns "latest", a non-negative int, or None for "pending".

    Raises:
        ValueError: if the value is not a recognized block parameter
    """
    if value is None or value == "latest":
        return "latest"
    if value == "earliest":
        return 0
    if value == "pending":
        return None

    if isinstance(value, bool):
        raise ValueError("block number cannot be boolean")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("block number must be non-negative")
        return value
    if isinstance(value, str):
        raw = value.strip()
        if is_hex(raw) and len(raw) > 2:
            return int(raw, 16)
        if DECIMAL_RE.fullmatch(raw):
            return int(raw, 10)
    raise ValueError(f"invalid block number: {value!r}")


def to_bytes32(value: Union[str, int]) -> str:
    """
    Left-pad a storage key to 32 bytes: '0x1' -> '0x000...0001'.

    Over-length input is rejected, never truncated.
    """
    if isinstance(value, bool):
        raise ValueError("key cannot be boolean")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("key must be non-negative")
        digits = format(value, "x")
    elif is_hex(value):
        digits = value[2:]
    else:
        raise ValueError(f"key must be an int or 0x-prefixed hex string: {value!r}")

    if len(digits) > 64:
        raise ValueError(f"key longer than 32 bytes: {value!r}")
    return "0x" + digits.lower().rjust(64, "0")
