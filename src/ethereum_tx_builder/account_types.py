"""Account-related types: address derivation for externally owned accounts."""

from dataclasses import dataclass

from .base_types import Address, SecretKey
from .conversions import FixedSizeBytesConvertible
from .crypto.elliptic_curve import (
    private_key_to_public_key,
    public_key_to_address,
    to_secret_key,
)


def private_key_to_address(key: FixedSizeBytesConvertible) -> Address:
    """
    Derive the account address controlled by a private key.

    The uncompressed public key is hashed without its `0x04` format tag and
    the last 20 bytes of the keccak256 digest form the address.
    """
    return public_key_to_address(private_key_to_public_key(key))


@dataclass(frozen=True)
class EOA:
    """An externally owned account: an address together with its private key."""

    address: Address
    key: SecretKey

    @classmethod
    def from_key(cls, key: FixedSizeBytesConvertible) -> "EOA":
        """Build the account for a private key, deriving its address."""
        secret_key = to_secret_key(key)
        return cls(address=private_key_to_address(secret_key), key=secret_key)

    def __str__(self) -> str:
        """Return the address of the account."""
        return str(self.address)
