"""
Transaction envelopes and EIP-7702 authorization tuples.

Each envelope declares the ordered fields of its signing payload and of its
signed serialization; the serialization mixin turns those tables into bytes.
Typed envelopes are prefixed with their type byte, authorization tuples are
signed over a payload prefixed with the `0x05` magic byte.
"""

from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Any, ClassVar, Dict, List, Literal, Sequence, Tuple, Type, TypeVar, Union

from .base_types import Address, Bytes, Hash
from .conversions import to_number
from .crypto.elliptic_curve import public_key_to_address, secp256k1_recover
from .crypto.hash import keccak256
from .exceptions import (
    AccessListNotSupportedError,
    InvalidSignatureError,
    RLPDecodingError,
    UnsupportedTransactionKind,
)
from .logging import get_logger
from .rlp import decode, decode_uint
from .serialization import RLPSerializable

logger = get_logger(__name__)

SET_CODE_AUTHORIZATION_MAGIC = 0x05

SIGNATURE_VALUE_LIMIT = 2**256


class TransactionType(IntEnum):
    """Transaction types."""

    LEGACY = 0
    FEE_MARKET = 2
    SET_CODE = 4


TRANSACTION_KIND_ALIASES: Dict[str, TransactionType] = {
    "legacy": TransactionType.LEGACY,
    "eip155": TransactionType.LEGACY,
    "eip1559": TransactionType.FEE_MARKET,
    "fee_market": TransactionType.FEE_MARKET,
    "eip7702": TransactionType.SET_CODE,
    "set_code": TransactionType.SET_CODE,
}


def _to_uint(name: str, value: Any) -> int:
    try:
        number = to_number(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"`{name}` must be an unsigned integer, got {value!r}") from e
    if number < 0:
        raise ValueError(f"`{name}` must not be negative, got {number}")
    return number


class SignedFields(RLPSerializable):
    """
    Field coercion and signature checks shared by envelopes and
    authorization tuples. Subclasses are frozen dataclasses.
    """

    r: int
    s: int

    def __post_init__(self) -> None:
        """Coerce every field to its declared type."""
        for field in fields(self):  # type: ignore[arg-type]
            value = getattr(self, field.name)
            if field.type is int:
                value = _to_uint(field.name, value)
            elif field.type is Address:
                value = Address(value)
            elif field.type is Bytes:
                value = Bytes(value)
            object.__setattr__(self, field.name, value)

        if self.r >= SIGNATURE_VALUE_LIMIT or self.s >= SIGNATURE_VALUE_LIMIT:
            raise ValueError("signature `r` and `s` must fit in 32 bytes")

    @property
    def is_signed(self) -> bool:
        """Whether the signature fields have been populated."""
        return self.r != 0 or self.s != 0


@dataclass(frozen=True)
class Authorization(SignedFields):
    """
    EIP-7702 authorization tuple, signed by the account that delegates its
    code to `address`. A `chain_id` of zero makes the authorization valid on
    every chain.
    """

    chain_id: int
    address: Address
    nonce: int
    y_parity: int = 0
    r: int = 0
    s: int = 0

    magic: ClassVar[int] = SET_CODE_AUTHORIZATION_MAGIC

    rlp_fields: ClassVar[List[str]] = ["chain_id", "address", "nonce", "y_parity", "r", "s"]
    rlp_signing_fields: ClassVar[List[str]] = ["chain_id", "address", "nonce"]

    def __post_init__(self) -> None:
        """Coerce fields and check the parity bit."""
        super().__post_init__()
        if self.y_parity not in (0, 1):
            raise ValueError(f"`y_parity` must be 0 or 1, got {self.y_parity}")

    def get_rlp_signing_prefix(self) -> bytes:
        """Return the magic byte that separates authorization signing hashes."""
        return self.magic.to_bytes(1, byteorder="big")

    @property
    def recovery_id(self) -> int:
        """Return the recovery id of the signature."""
        return self.y_parity


@dataclass(frozen=True)
class LegacyTransaction(SignedFields):
    """
    Legacy transaction with EIP-155 replay protection. The chain id is part
    of the signing payload and is folded into `v` once signed.
    """

    chain_id: int
    nonce: int
    gas_price: int
    gas_limit: int
    to: Address
    value: int = 0
    data: Bytes = Bytes(b"")
    v: int = 0
    r: int = 0
    s: int = 0

    ty: ClassVar[TransactionType] = TransactionType.LEGACY
    zero: ClassVar[Literal[0]] = 0

    # EIP-155: https://eips.ethereum.org/EIPS/eip-155
    rlp_signing_fields: ClassVar[List[str]] = [
        "nonce",
        "gas_price",
        "gas_limit",
        "to",
        "value",
        "data",
        "chain_id",
        "zero",
        "zero",
    ]
    rlp_fields: ClassVar[List[str]] = [
        "nonce",
        "gas_price",
        "gas_limit",
        "to",
        "value",
        "data",
        "v",
        "r",
        "s",
    ]

    @property
    def recovery_id(self) -> int:
        """Return the recovery id folded into `v`."""
        recovery_id = self.v - 35 - 2 * self.chain_id
        if recovery_id not in (0, 1):
            raise InvalidSignatureError("bad v")
        return recovery_id


@dataclass(frozen=True)
class FeeMarketTransaction(SignedFields):
    """
    The transaction type added in EIP-1559.
    """

    chain_id: int
    nonce: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    gas_limit: int
    to: Address
    value: int = 0
    data: Bytes = Bytes(b"")
    access_list: Tuple[Any, ...] = ()
    y_parity: int = 0
    r: int = 0
    s: int = 0

    ty: ClassVar[TransactionType] = TransactionType.FEE_MARKET

    # EIP-1559: https://eips.ethereum.org/EIPS/eip-1559
    rlp_signing_fields: ClassVar[List[str]] = [
        "chain_id",
        "nonce",
        "max_priority_fee_per_gas",
        "max_fee_per_gas",
        "gas_limit",
        "to",
        "value",
        "data",
        "access_list",
    ]
    rlp_fields: ClassVar[List[str]] = rlp_signing_fields + ["y_parity", "r", "s"]

    def __post_init__(self) -> None:
        """Coerce fields, reject access list entries and check the parity bit."""
        super().__post_init__()
        access_list = tuple(self.access_list)
        if access_list:
            raise AccessListNotSupportedError(
                f"access lists must be empty, got {len(access_list)} entries"
            )
        object.__setattr__(self, "access_list", access_list)
        if self.y_parity not in (0, 1):
            raise ValueError(f"`y_parity` must be 0 or 1, got {self.y_parity}")

    def get_rlp_prefix(self) -> bytes:
        """Return the transaction type byte."""
        return bytes([self.ty])

    def get_rlp_signing_prefix(self) -> bytes:
        """Return the transaction type byte."""
        return bytes([self.ty])

    @property
    def recovery_id(self) -> int:
        """Return the recovery id of the signature."""
        return self.y_parity


@dataclass(frozen=True)
class SetCodeTransaction(FeeMarketTransaction):
    """
    The transaction type added in EIP-7702, carrying signed authorization
    tuples.
    """

    authorizations: Tuple[Authorization, ...] = ()

    ty: ClassVar[TransactionType] = TransactionType.SET_CODE

    # EIP-7702: https://eips.ethereum.org/EIPS/eip-7702
    rlp_signing_fields: ClassVar[List[str]] = FeeMarketTransaction.rlp_signing_fields + [
        "authorizations"
    ]
    rlp_fields: ClassVar[List[str]] = rlp_signing_fields + ["y_parity", "r", "s"]

    def __post_init__(self) -> None:
        """Coerce fields and check the authorization list."""
        super().__post_init__()
        authorizations = tuple(self.authorizations)
        for authorization in authorizations:
            if not isinstance(authorization, Authorization):
                raise TypeError(
                    f"authorization list entries must be `Authorization`, "
                    f"got {type(authorization).__name__}"
                )
        object.__setattr__(self, "authorizations", authorizations)


Transaction = Union[LegacyTransaction, FeeMarketTransaction, SetCodeTransaction]

TRANSACTION_CLASSES: Dict[TransactionType, Type[Transaction]] = {
    TransactionType.LEGACY: LegacyTransaction,
    TransactionType.FEE_MARKET: FeeMarketTransaction,
    TransactionType.SET_CODE: SetCodeTransaction,
}


def transaction_type(kind: Union[TransactionType, int, str]) -> TransactionType:
    """
    Resolve a transaction kind given as enum member, type number or name.
    """
    if isinstance(kind, str):
        normalized = kind.strip().lower().replace("-", "")
        if normalized in TRANSACTION_KIND_ALIASES:
            return TRANSACTION_KIND_ALIASES[normalized]
        raise UnsupportedTransactionKind(kind)
    if isinstance(kind, int) and not isinstance(kind, bool):
        try:
            return TransactionType(kind)
        except ValueError:
            raise UnsupportedTransactionKind(kind) from None
    raise UnsupportedTransactionKind(kind)


def build_transaction(kind: Union[TransactionType, int, str], **kwargs: Any) -> Transaction:
    """
    Create an unsigned envelope of the requested kind from its fields.

    Parameters
    ----------
    kind :
        `legacy`, `eip1559` or `eip7702`, or the matching type number.
    kwargs :
        The envelope fields, without signature values.

    Returns
    -------
    transaction : `Transaction`
        The unsigned envelope; its signature fields are zero.
    """
    cls = TRANSACTION_CLASSES[transaction_type(kind)]
    transaction = cls(**kwargs)
    logger.debug("built unsigned %s with nonce %d", cls.__name__, transaction.nonce)
    return transaction


def encode_transaction(tx: Transaction) -> Bytes:
    """
    Serialize a signed envelope the way it is broadcast.
    """
    if not tx.is_signed:
        raise InvalidSignatureError("transaction must be signed before it is serialized")
    return tx.rlp()


def to_raw_transaction_hex(tx: Transaction) -> str:
    """
    Return the `0x` prefixed, lowercase hex of the signed serialization.
    """
    return encode_transaction(tx).hex()


def transaction_hash(tx: Transaction) -> Hash:
    """
    Return the hash identifying a signed transaction on chain.
    """
    return keccak256(encode_transaction(tx))


#
# Decoding and signer recovery
#


S = TypeVar("S", bound=SignedFields)


def _from_rlp_list(cls: Type[S], values: Sequence[Any], **extra: Any) -> S:
    """
    Rebuild an envelope or authorization from its decoded signed field list.
    """
    if isinstance(values, bytes):
        raise RLPDecodingError(f"got `bytes` while decoding `{cls.__name__}`")
    rlp_fields = cls.rlp_fields
    if len(rlp_fields) != len(values):
        raise RLPDecodingError(
            f"`{cls.__name__}` needs {len(rlp_fields)} field(s), but got {len(values)} instead"
        )

    field_types = {field.name: field.type for field in fields(cls)}  # type: ignore[arg-type]
    kwargs: Dict[str, Any] = dict(extra)
    for name, value in zip(rlp_fields, values):
        field_type = field_types[name]
        if name == "access_list":
            if isinstance(value, bytes):
                raise RLPDecodingError("access list must be an RLP list")
            kwargs[name] = tuple(value)
        elif name == "authorizations":
            if isinstance(value, bytes):
                raise RLPDecodingError("authorization list must be an RLP list")
            kwargs[name] = tuple(_from_rlp_list(Authorization, item) for item in value)
        elif field_type is int:
            kwargs[name] = decode_uint(value)
        elif field_type is Address:
            if not isinstance(value, bytes) or len(value) != 20:
                raise RLPDecodingError(f"`{name}` must be a 20-byte address")
            kwargs[name] = Address(value)
        else:
            if not isinstance(value, bytes):
                raise RLPDecodingError(f"`{name}` must be a byte string")
            kwargs[name] = Bytes(value)
    try:
        return cls(**kwargs)
    except ValueError as e:
        raise RLPDecodingError(f"invalid `{cls.__name__}`: {e}") from e


def decode_transaction(raw: Union[bytes, str]) -> Transaction:
    """
    Parse a signed serialization back into its envelope.
    """
    raw = Bytes(raw)
    if len(raw) == 0:
        raise RLPDecodingError("cannot decode an empty transaction")

    if raw[0] >= 0xC0:
        values = decode(raw)
        if isinstance(values, bytes) or len(values) != len(LegacyTransaction.rlp_fields):
            raise RLPDecodingError("malformed legacy transaction")
        v = decode_uint(values[6])
        if v < 35:
            raise InvalidSignatureError("only EIP-155 protected legacy transactions are supported")
        return _from_rlp_list(LegacyTransaction, values, chain_id=(v - 35) // 2)

    try:
        ty = TransactionType(raw[0])
    except ValueError:
        raise UnsupportedTransactionKind(raw[0]) from None
    if ty == TransactionType.LEGACY:
        raise UnsupportedTransactionKind(raw[0])
    return _from_rlp_list(TRANSACTION_CLASSES[ty], decode(raw[1:]))


def _recover_signer(signed: Union[Transaction, Authorization]) -> Address:
    public_key = secp256k1_recover(
        signed.r, signed.s, signed.recovery_id, signed.signing_hash()
    )
    return public_key_to_address(public_key)


def recover_sender(tx: Transaction) -> Address:
    """
    Extracts the sender address from a signed transaction.

    The sender's public key is recovered from the signature and the signing
    hash of the transaction, and hashed into an address.
    """
    if not tx.is_signed:
        raise InvalidSignatureError("transaction is not signed")
    return _recover_signer(tx)


def recover_authority(authorization: Authorization) -> Address:
    """
    Extracts the address of the account that signed an authorization tuple.
    """
    if not authorization.is_signed:
        raise InvalidSignatureError("authorization is not signed")
    return _recover_signer(authorization)
