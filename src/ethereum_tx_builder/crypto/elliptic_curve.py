"""
Elliptic Curves
^^^^^^^^^^^^^^^

Recoverable ECDSA over secp256k1, backed by `coincurve` (libsecp256k1).
"""

from typing import Tuple

import coincurve

from ..base_types import Address, SecretKey
from ..conversions import FixedSizeBytesConvertible
from ..exceptions import (
    InvalidDigest,
    InvalidKey,
    InvalidSignatureError,
    NonCanonicalSignatureError,
)
from .hash import Hash32, keccak256

SECP256K1B = 7
SECP256K1P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
SECP256K1N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def to_secret_key(key: FixedSizeBytesConvertible) -> SecretKey:
    """
    Parse a private key given as hex string, raw bytes or integer.

    Parameters
    ----------
    key :
        The private key. Hex strings may be `0x` prefixed and must hold
        exactly 32 bytes.

    Returns
    -------
    secret_key : `ethereum_tx_builder.base_types.SecretKey`
        The validated 32-byte scalar.
    """
    if isinstance(key, SecretKey):
        return key
    try:
        secret_key = SecretKey(key)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidKey("private key must be a 32-byte scalar") from e

    scalar = int.from_bytes(secret_key, byteorder="big")
    if not 0 < scalar < SECP256K1N:
        raise InvalidKey("private key is out of range for secp256k1")
    return secret_key


def private_key_to_public_key(key: FixedSizeBytesConvertible) -> bytes:
    """
    Derive the 64-byte uncompressed public key (without the `0x04` tag).
    """
    secret_key = to_secret_key(key)
    public_key = coincurve.PrivateKey(bytes(secret_key)).public_key
    return public_key.format(compressed=False)[1:]


def public_key_to_address(public_key: bytes) -> Address:
    """
    Compute the address of an uncompressed, untagged 64-byte public key.
    """
    if len(public_key) != 64:
        raise ValueError(f"expected a 64-byte public key, got {len(public_key)} bytes")
    return Address(keccak256(public_key)[12:32])


def secp256k1_sign(msg_hash: bytes, key: FixedSizeBytesConvertible) -> Tuple[int, int, int]:
    """
    Produce a deterministic (RFC 6979) recoverable signature over a digest.

    Parameters
    ----------
    msg_hash :
        The 32-byte digest to sign.
    key :
        Private key of the signer.

    Returns
    -------
    signature : `Tuple[int, int, int]`
        The `r`, `s` and recovery id of the signature.
    """
    if len(msg_hash) != 32:
        raise InvalidDigest(f"digest must be exactly 32 bytes, got {len(msg_hash)}")

    secret_key = to_secret_key(key)
    signature = coincurve.PrivateKey(bytes(secret_key)).sign_recoverable(
        bytes(msg_hash), hasher=None
    )

    r = int.from_bytes(signature[0:32], byteorder="big")
    s = int.from_bytes(signature[32:64], byteorder="big")
    recovery_id = signature[64]

    if recovery_id not in (0, 1):
        raise NonCanonicalSignatureError(f"unexpected recovery id {recovery_id}")
    if not 0 < s <= SECP256K1N // 2:
        raise NonCanonicalSignatureError("signature `s` value is not in the lower half order")
    return r, s, recovery_id


def secp256k1_recover(r: int, s: int, v: int, msg_hash: Hash32) -> bytes:
    """
    Recovers the public key from a given signature.

    Parameters
    ----------
    r :
        The `r` component of the signature.
    s :
        The `s` component of the signature.
    v :
        The recovery id, either 0 or 1.
    msg_hash :
        Hash of the message being recovered.

    Returns
    -------
    public_key : `bytes`
        Recovered 64-byte public key.
    """
    if v not in (0, 1):
        raise InvalidSignatureError(f"bad recovery id {v}")
    if not 0 < r < SECP256K1N:
        raise InvalidSignatureError("bad r")
    if not 0 < s <= SECP256K1N // 2:
        raise InvalidSignatureError("bad s")

    is_square = pow(
        pow(r, 3, SECP256K1P) + SECP256K1B,
        (SECP256K1P - 1) // 2,
        SECP256K1P,
    )
    if is_square != 1:
        raise InvalidSignatureError(
            "r is not the x-coordinate of a point on the secp256k1 curve"
        )

    signature = r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big") + bytes([v])

    # Recovery of the point at infinity is reported as a ValueError
    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            signature, bytes(msg_hash), hasher=None
        )
    except ValueError as e:
        raise InvalidSignatureError from e

    return public_key.format(compressed=False)[1:]
