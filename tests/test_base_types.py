"""
Test suite for the basic byte and number types.
"""

from typing import Any

import pytest

from ethereum_tx_builder.base_types import Address, Bytes, Hash, HexNumber, Number, SecretKey
from ethereum_tx_builder.conversions import to_bytes, to_fixed_size_bytes, to_number


@pytest.mark.parametrize(
    "a, b, equal",
    [
        (Address(0), Address(0), True),
        (Address(0), Address(1), False),
        (Address(1), "0x" + "00" * 19 + "01", True),
        (Address(1), "0x" + "00" * 19 + "02", False),
        (Address(1), 1, True),
        (Address(1), 2, False),
        (Address(1), b"\x00" * 19 + b"\x01", True),
        (Address(1), "0x1", False),
        ("0x" + "00" * 19 + "01", Address(1), True),
        (1, Address(1), True),
        (Hash(1), 1, True),
        (Hash(1), "0x" + "00" * 31 + "01", True),
        (Hash(1), Hash(2), False),
    ],
)
def test_comparisons(a: Any, b: Any, equal: bool):
    """
    Test the comparison methods of the base types.
    """
    if equal:
        assert a == b
        assert not a != b
    else:
        assert a != b
        assert not a == b


def test_address_parsing_is_case_insensitive():
    assert Address("0x9d8A62f656a8d1615C1294fd71e9CFb3E4855A4F") == Address(
        "0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f"
    )
    assert str(Address("0x9d8A62f656a8d1615C1294fd71e9CFb3E4855A4F")) == (
        "0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f"
    )


@pytest.mark.parametrize(
    "input_bytes",
    [
        pytest.param("0x" + "aa" * 19, id="too_short"),
        pytest.param("0x" + "aa" * 21, id="too_long"),
        pytest.param(-1, id="negative"),
    ],
)
def test_address_rejects_wrong_size(input_bytes: Any):
    with pytest.raises(ValueError):
        Address(input_bytes)


def test_address_left_padding():
    assert Address("0x01", left_padding=True) == Address(1)


def test_bytes():
    assert Bytes("0x0102").hex() == "0x0102"
    assert Bytes("0102") == b"\x01\x02"
    assert Bytes("0x102") == b"\x01\x02"
    assert Bytes("0x 01 02") == b"\x01\x02"
    assert Bytes([1, 2]) == b"\x01\x02"
    assert str(Bytes(b"")) == "0x"


def test_secret_key_is_redacted():
    key = SecretKey("0x" + "46" * 32)
    assert "46" not in str(key)
    assert "46" not in repr(key)
    assert bytes(key) == b"\x46" * 32


@pytest.mark.parametrize(
    "s, expected",
    [
        ("0", 0),
        ("10", 10),
        ("0x10", 16),
        ("0X10", 16),
        (b"\x01\x00", 256),
        (1337, 1337),
    ],
)
def test_to_number(s: Any, expected: int):
    assert to_number(s) == expected
    assert Number(s) == expected


def test_number_rejects_negative():
    with pytest.raises(ValueError):
        Number(-1)


def test_hex_number():
    assert str(HexNumber(1337)) == "0x539"
    assert str(Number(1337)) == "1337"


def test_conversions():
    assert to_bytes("0xab") == b"\xab"
    assert to_fixed_size_bytes(1, 2) == b"\x00\x01"
    assert to_fixed_size_bytes("0x01", 2, left_padding=True) == b"\x00\x01"
    with pytest.raises(ValueError):
        to_fixed_size_bytes("0x01", 2)
    with pytest.raises(OverflowError):
        to_fixed_size_bytes(2**16, 2)
    with pytest.raises(TypeError):
        to_bytes(1.5)  # type: ignore[arg-type]
