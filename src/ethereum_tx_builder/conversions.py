"""Conversions from user and JSON-RPC input to bytes and integers."""

import re
from typing import List, SupportsBytes, TypeAlias

BytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int]
FixedSizeBytesConvertible: TypeAlias = BytesConvertible | int
NumberConvertible: TypeAlias = str | bytes | SupportsBytes | int

_WHITESPACE = re.compile(r"\s+")


def _hex_to_bytes(text: str) -> bytes:
    digits = _WHITESPACE.sub("", text)
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]
    if len(digits) % 2:
        digits = "0" + digits
    return bytes.fromhex(digits)


def to_bytes(value: BytesConvertible) -> bytes:
    """
    Convert `value` to bytes.

    Strings are read as hex, with or without a `0x` prefix. Whitespace is
    ignored and an odd number of digits gets a leading zero.
    """
    if value is None:
        raise ValueError("cannot convert None to bytes")
    if isinstance(value, str):
        return _hex_to_bytes(value)
    if isinstance(value, (bytes, list, SupportsBytes)):
        return bytes(value)
    raise TypeError(f"cannot convert {type(value).__name__} to bytes")


def to_fixed_size_bytes(
    value: FixedSizeBytesConvertible, size: int, *, left_padding: bool = False
) -> bytes:
    """
    Convert `value` to exactly `size` bytes.

    Integers are encoded big-endian and always padded; an integer too
    large for `size` raises `OverflowError`. Other inputs must already
    have `size` bytes unless `left_padding` allows zeros to be prepended.
    """
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"cannot convert negative number {value} to bytes")
        return value.to_bytes(size, "big")

    data = to_bytes(value)
    if len(data) == size:
        return data
    if len(data) > size:
        raise ValueError(f"expected {size} bytes, got {len(data)}")
    if not left_padding:
        raise ValueError(f"expected {size} bytes, got {len(data)} (left_padding is off)")
    return data.rjust(size, b"\x00")


def to_number(value: NumberConvertible) -> int:
    """
    Convert `value` to an integer.

    Strings may be decimal or carry a base prefix such as `0x`; bytes are
    read as a big-endian unsigned integer.
    """
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value.strip(), 0)
    if isinstance(value, (bytes, SupportsBytes)):
        return int.from_bytes(bytes(value), "big")
    raise TypeError(f"cannot convert {type(value).__name__} to a number")
