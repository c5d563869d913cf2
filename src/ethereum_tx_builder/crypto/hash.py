"""
Cryptographic Hash Functions
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Keccak-256, the digest behind signing hashes and address derivation.
"""

from Crypto.Hash import keccak

from ..base_types import Hash

Hash32 = Hash


def keccak256(buffer: bytes) -> Hash32:
    """
    Keccak-256 digest of `buffer`, as used by Ethereum (not SHA3-256).

    Parameters
    ----------
    buffer :
        Bytes to hash.

    Returns
    -------
    hash : `ethereum_tx_builder.base_types.Hash`
        The 32-byte digest.
    """
    return Hash32(keccak.new(data=bytes(buffer), digest_bits=256).digest())
