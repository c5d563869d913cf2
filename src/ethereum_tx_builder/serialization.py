"""
Field-list driven RLP serialization for transactions and authorizations.

A serializable class lists, in wire order, the attributes that make up its
full encoding (`rlp_fields`) and the subset that is hashed for signing
(`rlp_signing_fields`). Typed envelopes additionally prepend a prefix byte.
"""

from typing import Any, ClassVar, List

from .base_types import Bytes, Hash
from .crypto.hash import keccak256
from .rlp import encode as rlp_encode


def to_serializable_element(v: Any) -> Any:
    """
    Normalize an attribute value to something `rlp_encode` accepts.

    `None` becomes the empty string, tuples become lists and nested
    serializable objects become their field lists.
    """
    if isinstance(v, RLPSerializable):
        return v.to_list()
    if v is None:
        return b""
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return int(v)
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    if isinstance(v, (list, tuple)):
        return [to_serializable_element(item) for item in v]
    raise TypeError(f"cannot RLP serialize {type(v).__name__} value {v!r}")


class RLPSerializable:
    """Mixin adding `rlp()`, `rlp_signing_bytes()` and `signing_hash()`."""

    rlp_fields: ClassVar[List[str]]
    rlp_signing_fields: ClassVar[List[str]]

    def get_rlp_prefix(self) -> bytes:
        """Bytes written before the full encoding; none by default."""
        return b""

    def get_rlp_signing_prefix(self) -> bytes:
        """Bytes written before the signing payload; none by default."""
        return b""

    def to_list(self, signing: bool = False) -> List[Any]:
        """Values of `rlp_fields`, or of `rlp_signing_fields` when `signing`."""
        names = self.rlp_signing_fields if signing else self.rlp_fields
        missing = [name for name in names if not hasattr(self, name)]
        if missing:
            raise AttributeError(
                f"{type(self).__name__} has no field(s) {', '.join(missing)} to RLP serialize"
            )
        return [to_serializable_element(getattr(self, name)) for name in names]

    def rlp(self) -> Bytes:
        """Full encoding, prefix included."""
        return Bytes(self.get_rlp_prefix() + rlp_encode(self.to_list()))

    def rlp_signing_bytes(self) -> Bytes:
        """Payload whose hash is signed, prefix included."""
        return Bytes(self.get_rlp_signing_prefix() + rlp_encode(self.to_list(signing=True)))

    def signing_hash(self) -> Hash:
        """Keccak-256 of `rlp_signing_bytes()`."""
        return keccak256(self.rlp_signing_bytes())
