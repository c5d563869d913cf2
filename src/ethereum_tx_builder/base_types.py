"""
Byte string and integer types for transaction fields.

Every type accepts the loose inputs understood by `conversions` (hex
strings, raw bytes, integers) and prints itself the way JSON-RPC and the
command line expect it: `0x`-prefixed lowercase hex for bytes, decimal
for `Number` and hex for `HexNumber`. The same string form is used when
the types appear in pydantic models.
"""

from typing import Any, ClassVar, SupportsBytes

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from .conversions import (
    BytesConvertible,
    FixedSizeBytesConvertible,
    NumberConvertible,
    to_bytes,
    to_fixed_size_bytes,
    to_number,
)


class ToStringSchema:
    """
    Mixin that validates a pydantic field by calling the class itself and
    serializes the value with `str()`.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            source_type, serialization=core_schema.to_string_ser_schema()
        )


class Number(int, ToStringSchema):
    """Non-negative integer of any size."""

    def __new__(cls, value: NumberConvertible):
        number = to_number(value)
        if number < 0:
            raise ValueError(f"{cls.__name__} cannot be negative: {number}")
        return int.__new__(cls, number)

    def __str__(self) -> str:
        return int.__repr__(self)

    def hex(self) -> str:
        """Return the number as a `0x`-prefixed hex string."""
        return hex(self)


class HexNumber(Number):
    """`Number` whose string form is hexadecimal, as JSON-RPC quantities are."""

    def __str__(self) -> str:
        return self.hex()


class Bytes(bytes, ToStringSchema):
    """Byte string of any length."""

    def __new__(cls, value: BytesConvertible = b""):
        if type(value) is cls:
            return value
        return bytes.__new__(cls, to_bytes(value))

    def __str__(self) -> str:
        return self.hex()

    def hex(self, *args: Any, **kwargs: Any) -> str:
        """Return the bytes as a `0x`-prefixed lowercase hex string."""
        return "0x" + bytes.hex(self, *args, **kwargs)


class FixedSizeBytes(Bytes):
    """
    Byte string of exactly `byte_length` bytes.

    Subclasses declare their size with a class keyword, e.g.
    `class Address(FixedSizeBytes, length=20)`. Shorter inputs are zero
    padded on the left only when `left_padding` is set; integers are
    always padded.
    """

    byte_length: ClassVar[int]

    def __init_subclass__(cls, length: int = 0, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if length:
            cls.byte_length = length

    def __new__(cls, value: FixedSizeBytesConvertible, *, left_padding: bool = False):
        if type(value) is cls:
            return value
        return bytes.__new__(
            cls, to_fixed_size_bytes(value, cls.byte_length, left_padding=left_padding)
        )

    __hash__ = Bytes.__hash__

    def __eq__(self, other: object) -> bool:
        if other is None:
            return False
        if isinstance(other, FixedSizeBytes):
            return bytes(self) == bytes(other)
        if not isinstance(other, (str, int, bytes, SupportsBytes)):
            return NotImplemented
        try:
            other = type(self)(other)
        except ValueError:
            return False
        return bytes(self) == bytes(other)

    def __ne__(self, other: object) -> bool:
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return equal
        return not equal


class Address(FixedSizeBytes, length=20):
    """20-byte account address."""


class Hash(FixedSizeBytes, length=32):
    """32-byte Keccak-256 digest."""


class SecretKey(FixedSizeBytes, length=32):
    """
    Raw secp256k1 private key.

    `str()` and `repr()` are redacted so a key cannot leak into logs.
    """

    def __str__(self) -> str:
        return "<redacted>"

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"
