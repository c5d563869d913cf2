"""
Cryptographic primitives: keccak256 and secp256k1.
"""

from .elliptic_curve import (
    SECP256K1N,
    private_key_to_public_key,
    public_key_to_address,
    secp256k1_recover,
    secp256k1_sign,
    to_secret_key,
)
from .hash import Hash32, keccak256

__all__ = (
    "Hash32",
    "SECP256K1N",
    "keccak256",
    "private_key_to_public_key",
    "public_key_to_address",
    "secp256k1_recover",
    "secp256k1_sign",
    "to_secret_key",
)
