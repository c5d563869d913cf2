"""
Test suite for the JSON-RPC client.
"""

import pytest
import requests

from ethereum_tx_builder.base_types import Address, Bytes, Hash
from ethereum_tx_builder.crypto.hash import keccak256
from ethereum_tx_builder.rpc import EthRPC, JSONRPCError, SendTransactionExceptionError
from tests.helpers import EIP155_SENDER, EIP155_SIGNED_TRANSACTION, FakeNode

NODE_URL = "http://127.0.0.1:8545"


def test_namespace() -> None:
    assert EthRPC.namespace == "eth"


def test_get_transaction_count(fake_node: FakeNode) -> None:
    fake_node.nonces[EIP155_SENDER] = 9
    rpc = EthRPC(NODE_URL)
    assert rpc.get_transaction_count(Address(EIP155_SENDER)) == 9
    assert rpc.get_transaction_count(EIP155_SENDER, block_number=16) == 9

    first, second = fake_node.requests
    assert first["url"] == NODE_URL
    assert first["json"] == {
        "jsonrpc": "2.0",
        "method": "eth_getTransactionCount",
        "params": [EIP155_SENDER, "latest"],
        "id": 1,
    }
    assert second["json"]["params"] == [EIP155_SENDER, "0x10"]
    assert second["json"]["id"] == 2


def test_chain_id(fake_node: FakeNode) -> None:
    assert EthRPC(NODE_URL).chain_id() == 1337
    assert fake_node.methods == ["eth_chainId"]
    assert fake_node.requests[0]["json"]["params"] == []


def test_headers_and_timeout(fake_node: FakeNode) -> None:
    rpc = EthRPC(NODE_URL, extra_headers={"client-secret": "secret"}, timeout=3.0)
    rpc.post_request("chainId", extra_headers={"x-request": "1"})
    request = fake_node.requests[0]
    assert request["headers"] == {
        "Content-Type": "application/json",
        "client-secret": "secret",
        "x-request": "1",
    }
    assert request["timeout"] == 3.0


def test_json_rpc_error(fake_node: FakeNode) -> None:
    fake_node.errors["eth_chainId"] = {"code": -32000, "message": "node is syncing"}
    with pytest.raises(JSONRPCError) as exc_info:
        EthRPC(NODE_URL).chain_id()
    assert exc_info.value.code == -32000
    assert exc_info.value.message == "node is syncing"
    assert str(exc_info.value) == "JSONRPCError(code=-32000, message=node is syncing)"


def test_http_error(fake_node: FakeNode) -> None:
    fake_node.status_code = 502
    with pytest.raises(requests.HTTPError):
        EthRPC(NODE_URL).chain_id()


def test_missing_result(monkeypatch: pytest.MonkeyPatch) -> None:
    class EmptyResponse:
        def raise_for_status(self) -> None:
            pass

        def json(self):
            return {"jsonrpc": "2.0", "id": 1}

    monkeypatch.setattr(requests, "post", lambda *args, **kwargs: EmptyResponse())
    with pytest.raises(JSONRPCError):
        EthRPC(NODE_URL).chain_id()


@pytest.mark.parametrize(
    "raw",
    [
        pytest.param(EIP155_SIGNED_TRANSACTION, id="hex"),
        pytest.param(bytes.fromhex(EIP155_SIGNED_TRANSACTION[2:]), id="bytes"),
        pytest.param(Bytes(EIP155_SIGNED_TRANSACTION), id="Bytes"),
    ],
)
def test_send_raw_transaction(fake_node: FakeNode, raw) -> None:
    transaction_hash = EthRPC(NODE_URL).send_raw_transaction(raw)
    assert isinstance(transaction_hash, Hash)
    assert transaction_hash == keccak256(bytes.fromhex(EIP155_SIGNED_TRANSACTION[2:]))
    assert fake_node.requests[0]["json"]["params"] == [EIP155_SIGNED_TRANSACTION]


def test_send_raw_transaction_rejected(fake_node: FakeNode) -> None:
    fake_node.errors["eth_sendRawTransaction"] = {"code": -32000, "message": "nonce too low"}
    with pytest.raises(SendTransactionExceptionError) as exc_info:
        EthRPC(NODE_URL).send_raw_transaction(EIP155_SIGNED_TRANSACTION)
    assert exc_info.value.tx_rlp == bytes.fromhex(EIP155_SIGNED_TRANSACTION[2:])
    assert "nonce too low" in str(exc_info.value)
    assert f"Transaction RLP={EIP155_SIGNED_TRANSACTION}" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, JSONRPCError)


def test_send_raw_transaction_http_error(fake_node: FakeNode) -> None:
    fake_node.status_code = 500
    with pytest.raises(SendTransactionExceptionError):
        EthRPC(NODE_URL).send_raw_transaction(EIP155_SIGNED_TRANSACTION)
    # No retries
    assert len(fake_node.requests) == 1
