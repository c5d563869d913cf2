"""JSON-RPC client used to fetch nonces and broadcast signed transactions."""

from itertools import count
from typing import Any, ClassVar, Dict, Literal, Optional, Union

import requests

from .base_types import Address, Bytes, Hash, HexNumber
from .logging import get_logger

logger = get_logger(__name__)

BlockTag = Union[int, Literal["latest", "earliest", "pending", "safe", "finalized"]]

DEFAULT_TIMEOUT = 10.0
INTERNAL_ERROR = -32603


class JSONRPCError(Exception):
    """Error object returned by the node in a JSON-RPC response."""

    def __init__(self, code: Union[int, str], message: str, **kwargs: Any):
        super().__init__(code, message)
        self.code = int(code)
        self.message = message
        self.data = kwargs.get("data")

    def __str__(self) -> str:
        return f"JSONRPCError(code={self.code}, message={self.message})"


class SendTransactionExceptionError(Exception):
    """
    The node refused a raw transaction, or could not be reached.

    The rejected encoding is kept in `tx_rlp` and shown in the message so
    it can be replayed by hand.
    """

    def __init__(self, *args: Any, tx_rlp: Optional[Bytes] = None):
        super().__init__(*args)
        self.tx_rlp = tx_rlp

    def __str__(self) -> str:
        message = super().__str__()
        if self.tx_rlp is None:
            return message
        return f"{message} Transaction RLP={self.tx_rlp.hex()}"


class BaseRPC:
    """
    Minimal JSON-RPC 2.0 client over HTTP.

    Subclasses are named after their method namespace: `EthRPC` calls
    `eth_*` methods.
    """

    namespace: ClassVar[str]

    def __init_subclass__(cls) -> None:
        cls.namespace = cls.__name__.removesuffix("RPC").lower()

    def __init__(
        self,
        url: str,
        extra_headers: Optional[Dict[str, str]] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.url = url
        self.extra_headers = dict(extra_headers or {})
        self.timeout = timeout
        self._ids = count(1)

    def post_request(
        self, method: str, *params: Any, extra_headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Call `<namespace>_<method>` with positional `params`.

        Returns the `result` member of the response. An `error` member, or a
        response without a result, raises `JSONRPCError`; HTTP failures raise
        the `requests` exception.
        """
        request_id = next(self._ids)
        rpc_method = f"{self.namespace}_{method}"
        headers = {
            "Content-Type": "application/json",
            **self.extra_headers,
            **(extra_headers or {}),
        }
        body = {"jsonrpc": "2.0", "id": request_id, "method": rpc_method, "params": list(params)}

        logger.debug("request %d: %s", request_id, rpc_method)
        response = requests.post(self.url, json=body, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        reply = response.json()

        error = reply.get("error")
        if error is not None:
            raise JSONRPCError(**error)
        if "result" not in reply:
            raise JSONRPCError(INTERNAL_ERROR, f"{rpc_method} response has no result")
        return reply["result"]


class EthRPC(BaseRPC):
    """The `eth_` methods used to build and send a transaction."""

    def get_transaction_count(self, address: Address, block_number: BlockTag = "latest") -> int:
        """Nonce of `address` at `block_number` (`eth_getTransactionCount`)."""
        if isinstance(block_number, int):
            block_number = str(HexNumber(block_number))
        result = self.post_request("getTransactionCount", str(Address(address)), block_number)
        return int(HexNumber(result))

    def chain_id(self) -> int:
        """Chain id reported by the node (`eth_chainId`)."""
        return int(HexNumber(self.post_request("chainId")))

    def send_raw_transaction(self, transaction_rlp: Union[Bytes, bytes, str]) -> Hash:
        """
        Broadcast a signed transaction (`eth_sendRawTransaction`) and return
        the hash reported by the node.

        Every failure, including an unreachable node or a malformed hash, is
        raised as `SendTransactionExceptionError`.
        """
        raw = Bytes(transaction_rlp)
        try:
            result = self.post_request("sendRawTransaction", raw.hex())
            if result is None:
                raise JSONRPCError(INTERNAL_ERROR, "node returned no transaction hash")
            tx_hash = Hash(result)
        except (JSONRPCError, requests.RequestException, ValueError) as e:
            raise SendTransactionExceptionError(str(e), tx_rlp=raw) from e
        logger.info("transaction %s accepted by %s", tx_hash, self.url)
        return tx_hash
