"""
Build and sign byte-exact Ethereum transactions: legacy (EIP-155),
EIP-1559 and EIP-7702 envelopes, and EIP-7702 authorization tuples.
"""

from .account_types import EOA, private_key_to_address
from .base_types import Address, Bytes, Hash, SecretKey
from .crypto import keccak256, to_secret_key
from .exceptions import (
    AccessListNotSupportedError,
    InvalidDigest,
    InvalidKey,
    InvalidSignatureError,
    NonCanonicalSignatureError,
    RLPDecodingError,
    RLPEncodingError,
    RLPException,
    SigningError,
    TransactionBuilderException,
    UnsupportedTransactionKind,
)
from .signing import (
    Signature,
    TransactionSigner,
    sign_authorization,
    sign_digest,
    sign_transaction,
    signed_authorization,
)
from .transactions import (
    Authorization,
    FeeMarketTransaction,
    LegacyTransaction,
    SetCodeTransaction,
    Transaction,
    TransactionType,
    build_transaction,
    decode_transaction,
    encode_transaction,
    recover_authority,
    recover_sender,
    to_raw_transaction_hex,
    transaction_hash,
)

__version__ = "1.0.0"

__all__ = (
    "AccessListNotSupportedError",
    "Address",
    "Authorization",
    "Bytes",
    "EOA",
    "FeeMarketTransaction",
    "Hash",
    "InvalidDigest",
    "InvalidKey",
    "InvalidSignatureError",
    "LegacyTransaction",
    "NonCanonicalSignatureError",
    "RLPDecodingError",
    "RLPEncodingError",
    "RLPException",
    "SecretKey",
    "SetCodeTransaction",
    "Signature",
    "SigningError",
    "Transaction",
    "TransactionBuilderException",
    "TransactionSigner",
    "TransactionType",
    "UnsupportedTransactionKind",
    "build_transaction",
    "decode_transaction",
    "encode_transaction",
    "keccak256",
    "private_key_to_address",
    "recover_authority",
    "recover_sender",
    "sign_authorization",
    "sign_digest",
    "sign_transaction",
    "signed_authorization",
    "to_raw_transaction_hex",
    "to_secret_key",
    "transaction_hash",
)
