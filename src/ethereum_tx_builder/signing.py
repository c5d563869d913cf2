"""
Signing coordinator.

Hashes the signing payload of an envelope or authorization tuple, signs the
digest with a recoverable secp256k1 signature and folds the result back into
a new, signed copy of the object.

Legacy transactions carry the recovery id folded with the chain id in `v`
(EIP-155), typed transactions and authorization tuples carry it unchanged as
`y_parity`.
"""

from dataclasses import dataclass, replace
from typing import TypeVar

from .account_types import EOA
from .base_types import Address
from .conversions import FixedSizeBytesConvertible
from .crypto.elliptic_curve import secp256k1_sign
from .exceptions import NonCanonicalSignatureError
from .logging import get_logger
from .transactions import (
    Authorization,
    FeeMarketTransaction,
    LegacyTransaction,
    Transaction,
)

logger = get_logger(__name__)

T = TypeVar("T", LegacyTransaction, FeeMarketTransaction)


@dataclass(frozen=True)
class Signature:
    """A recoverable secp256k1 signature."""

    r: int
    s: int
    recovery_id: int

    def __post_init__(self) -> None:
        """Check the signature components are in range."""
        if not 0 <= self.r < 2**256 or not 0 <= self.s < 2**256:
            raise ValueError("signature `r` and `s` must fit in 32 bytes")
        if self.recovery_id not in (0, 1):
            raise NonCanonicalSignatureError(f"unexpected recovery id {self.recovery_id}")

    def to_bytes(self) -> bytes:
        """Return the 65-byte `r || s || recovery_id` form."""
        return (
            self.r.to_bytes(32, byteorder="big")
            + self.s.to_bytes(32, byteorder="big")
            + bytes([self.recovery_id])
        )


def sign_digest(digest: bytes, key: FixedSizeBytesConvertible) -> Signature:
    """
    Sign a 32-byte digest.

    Raises `InvalidDigest` when the digest is not 32 bytes long and
    `InvalidKey` when the key is not a valid secp256k1 scalar.
    """
    r, s, recovery_id = secp256k1_sign(digest, key)
    return Signature(r=r, s=s, recovery_id=recovery_id)


def apply_signature(tx: T, signature: Signature) -> T:
    """
    Return a copy of `tx` carrying `signature` in its envelope convention.
    """
    if isinstance(tx, LegacyTransaction):
        v = signature.recovery_id + 2 * tx.chain_id + 35
        return replace(tx, v=v, r=signature.r, s=signature.s)
    return replace(tx, y_parity=signature.recovery_id, r=signature.r, s=signature.s)


def sign_transaction(tx: Transaction, key: FixedSizeBytesConvertible) -> Transaction:
    """
    Sign an unsigned envelope.

    Parameters
    ----------
    tx :
        The envelope to sign. Its signature fields are ignored.
    key :
        Private key of the sender.

    Returns
    -------
    signed : `Transaction`
        A new envelope with the signature folded in.
    """
    signing_hash = tx.signing_hash()
    signature = sign_digest(signing_hash, key)
    signed = apply_signature(tx, signature)
    logger.verbose(
        "signed %s with signing hash %s", type(tx).__name__, signing_hash
    )
    return signed


def sign_authorization(
    authorization: Authorization, key: FixedSizeBytesConvertible
) -> Authorization:
    """
    Sign an EIP-7702 authorization tuple with the key of the delegating
    account.
    """
    signing_hash = authorization.signing_hash()
    signature = sign_digest(signing_hash, key)
    logger.verbose(
        "signed authorization delegating to %s with signing hash %s",
        authorization.address,
        signing_hash,
    )
    return replace(
        authorization, y_parity=signature.recovery_id, r=signature.r, s=signature.s
    )


def signed_authorization(
    chain_id: int,
    address: FixedSizeBytesConvertible,
    nonce: int,
    key: FixedSizeBytesConvertible,
) -> Authorization:
    """Build and sign an authorization tuple in one step."""
    return sign_authorization(
        Authorization(chain_id=chain_id, address=Address(address), nonce=nonce), key
    )


class TransactionSigner:
    """Signs envelopes and authorization tuples with a single private key."""

    def __init__(self, key: FixedSizeBytesConvertible):
        """Validate the key and derive its address."""
        self.account = EOA.from_key(key)

    @property
    def address(self) -> Address:
        """Address of the signing account."""
        return self.account.address

    def sign(self, tx: Transaction) -> Transaction:
        """Sign an envelope."""
        return sign_transaction(tx, self.account.key)

    def authorize(
        self, chain_id: int, address: FixedSizeBytesConvertible, nonce: int
    ) -> Authorization:
        """Sign an authorization delegating this account's code to `address`."""
        return signed_authorization(chain_id, address, nonce, self.account.key)

    def __repr__(self) -> str:
        """Return the representation of the signer without its key."""
        return f"TransactionSigner(address={self.address})"
