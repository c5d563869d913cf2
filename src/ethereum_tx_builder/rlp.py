"""
.. _rlp:

Recursive Length Prefix (RLP) Encoding
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Serialization format of transaction envelopes and authorization tuples.

An item is either a byte string or a list of items. Byte strings and lists
carry a length prefix, except a single byte below `0x80`, which stands for
itself. Integers are written as their shortest big-endian byte string, so
zero is the empty string.
"""

from typing import TYPE_CHECKING, List, Sequence, Tuple, TypeAlias, Union

from ethereum_types.numeric import Uint

from .crypto.hash import Hash32, keccak256
from .exceptions import RLPDecodingError, RLPEncodingError

if TYPE_CHECKING:
    from .serialization import RLPSerializable

Simple: TypeAlias = Union[Sequence["Simple"], bytes]

Extended: TypeAlias = Union[
    Sequence["Extended"], bytearray, bytes, int, str, bool, "RLPSerializable"
]

STRING_OFFSET = 0x80
LIST_OFFSET = 0xC0
SHORT_PAYLOAD_LIMIT = 56


#
# Encoding
#


def encode(raw_data: Extended) -> bytes:
    """
    Serialize `raw_data` with RLP.

    Parameters
    ----------
    raw_data :
        Byte string, unsigned integer, boolean, text, `RLPSerializable` or a
        (nested) sequence of those.

    Returns
    -------
    encoded : `bytes`
        The serialized item.
    """
    from .serialization import RLPSerializable

    if isinstance(raw_data, (bytes, bytearray)):
        return encode_bytes(raw_data)
    if isinstance(raw_data, str):
        return encode_bytes(raw_data.encode())
    # bool is checked before int, which it subclasses
    if isinstance(raw_data, bool):
        return encode_bytes(b"\x01" if raw_data else b"")
    if isinstance(raw_data, int):
        return encode_bytes(encode_uint(raw_data))
    if isinstance(raw_data, RLPSerializable):
        return encode_sequence(raw_data.to_list(signing=False))
    if isinstance(raw_data, Sequence):
        return encode_sequence(raw_data)
    raise RLPEncodingError(f"cannot RLP encode a value of type {type(raw_data).__name__}")


def encode_uint(value: int) -> bytes:
    """
    Shortest big-endian byte string of a non-negative integer; zero is `b""`.
    """
    if value < 0:
        raise RLPEncodingError(f"cannot RLP encode negative integer {value}")
    return bytes(Uint(int(value)).to_be_bytes())


def _length_prefix(payload_length: int, offset: int) -> bytes:
    if payload_length < SHORT_PAYLOAD_LIMIT:
        return bytes([offset + payload_length])
    length_bytes = encode_uint(payload_length)
    return bytes([offset + SHORT_PAYLOAD_LIMIT - 1 + len(length_bytes)]) + length_bytes


def encode_bytes(raw_bytes: Union[bytes, bytearray]) -> bytes:
    """
    Serialize a single byte string.

    Parameters
    ----------
    raw_bytes :
        The byte string.

    Returns
    -------
    encoded : `bytes`
        `raw_bytes` itself when it is one byte below `0x80`, otherwise
        `raw_bytes` behind a string length prefix.
    """
    payload = bytes(raw_bytes)
    if len(payload) == 1 and payload[0] < STRING_OFFSET:
        return payload
    return _length_prefix(len(payload), STRING_OFFSET) + payload


def encode_sequence(raw_sequence: Sequence[Extended]) -> bytes:
    """
    Serialize a list: the concatenated item encodings behind a list length
    prefix.
    """
    payload = b"".join(encode(item) for item in raw_sequence)
    return _length_prefix(len(payload), LIST_OFFSET) + payload


def rlp_hash(data: Extended) -> Hash32:
    """
    Keccak-256 of the RLP encoding of `data`.
    """
    return keccak256(encode(data))


#
# Decoding
#


def decode(encoded_data: bytes) -> Simple:
    """
    Deserialize one RLP item into a byte string or a nested list of them.

    Non-canonical encodings are rejected: a prefixed single byte below
    `0x80`, a long form for a short payload, a length with leading zeros.
    The item must span all of `encoded_data`.

    Parameters
    ----------
    encoded_data :
        The serialized item.

    Returns
    -------
    decoded_data : `Simple`
        The byte string or list of items.
    """
    data = bytes(encoded_data)
    if not data:
        raise RLPDecodingError("cannot decode an empty byte string")

    item, end = _decode_item(data, 0, len(data))
    if end != len(data):
        raise RLPDecodingError(f"{len(data) - end} trailing byte(s) after RLP item")
    return item


def _read_long_length(data: bytes, start: int, size: int, limit: int) -> int:
    if start + size > limit:
        raise RLPDecodingError("length of length runs past the end of the input")
    if data[start] == 0:
        raise RLPDecodingError("length has a leading zero byte")
    length = int.from_bytes(data[start : start + size], "big")
    if length < SHORT_PAYLOAD_LIMIT:
        raise RLPDecodingError(f"long form used for a {length} byte payload")
    return length


def _decode_item(data: bytes, position: int, limit: int) -> Tuple[Simple, int]:
    """
    Decode the item at `position`, which must end before `limit`. Returns
    the item and the position after it.
    """
    if position >= limit:
        raise RLPDecodingError("unexpected end of input")

    prefix = data[position]
    if prefix < STRING_OFFSET:
        return data[position : position + 1], position + 1

    is_list = prefix >= LIST_OFFSET
    short_length = prefix - (LIST_OFFSET if is_list else STRING_OFFSET)
    if short_length < SHORT_PAYLOAD_LIMIT:
        start = position + 1
        length = short_length
    else:
        length_size = short_length - SHORT_PAYLOAD_LIMIT + 1
        start = position + 1 + length_size
        length = _read_long_length(data, position + 1, length_size, limit)

    end = start + length
    if end > limit:
        raise RLPDecodingError("RLP payload runs past the end of the input")

    if not is_list:
        payload = data[start:end]
        if length == 1 and payload[0] < STRING_OFFSET:
            raise RLPDecodingError("single byte below 0x80 must not carry a prefix")
        return payload, end

    items: List[Simple] = []
    while start < end:
        item, start = _decode_item(data, start, end)
        items.append(item)
    return items, end


def decode_uint(encoded_value: bytes) -> int:
    """
    Read a decoded byte string as an unsigned integer, rejecting leading
    zero bytes.
    """
    if not isinstance(encoded_value, bytes):
        raise RLPDecodingError("expected a byte string for an integer field")
    if encoded_value[:1] == b"\x00":
        raise RLPDecodingError("integer field has a leading zero byte")
    return int.from_bytes(encoded_value, "big")
