"""
Error types raised while building and signing transactions.
"""


class TransactionBuilderException(Exception):
    """
    Base class for all exceptions raised by the transaction builder.
    """


class InvalidKey(TransactionBuilderException):
    """
    Thrown when a private key is malformed or is not a valid secp256k1
    scalar.
    """


class SigningError(TransactionBuilderException):
    """
    Thrown when a digest cannot be signed.
    """


class InvalidDigest(SigningError):
    """
    Thrown when the digest handed to the signer is not exactly 32 bytes.
    """


class NonCanonicalSignatureError(SigningError):
    """
    Thrown when the signing backend returns a signature with a high `s`
    value or a recovery id other than 0 or 1.
    """


class UnsupportedTransactionKind(TransactionBuilderException):
    """
    Thrown when the requested envelope is not legacy, EIP-1559 or EIP-7702.
    """

    def __init__(self, kind: object):
        super().__init__(f"unsupported transaction kind: {kind!r}")
        self.kind = kind


class AccessListNotSupportedError(TransactionBuilderException):
    """
    Thrown when a transaction is given a non-empty access list. Only the
    empty access list can be serialized.
    """


class InvalidSignatureError(TransactionBuilderException):
    """
    Thrown when a signature is out of range or does not recover to a public
    key.
    """


class RLPException(TransactionBuilderException):
    """
    Common base class for all RLP exceptions.
    """


class RLPEncodingError(RLPException):
    """
    Indicates that RLP encoding failed.
    """


class RLPDecodingError(RLPException):
    """
    Indicates that RLP decoding failed.
    """
