"""
Known vectors and a fake JSON-RPC node shared by the tests.
"""

from typing import Any, Dict, List

import requests

from ethereum_tx_builder.base_types import Bytes
from ethereum_tx_builder.crypto.hash import keccak256

# https://eips.ethereum.org/EIPS/eip-155 example transaction
EIP155_PRIVATE_KEY = "0x" + "46" * 32
EIP155_SENDER = "0x9d8a62f656a8d1615c1294fd71e9cfb3e4855a4f"
EIP155_SIGNING_DATA = (
    "0xec098504a817c800825208943535353535353535353535353535353535353535880de0b6b3a7640000"
    "80018080"
)
EIP155_SIGNING_HASH = "0xdaf5a779ae972f972197303d7b574746c7ef83eadac0f2791ad23db92e4c8e53"
EIP155_R = 18515461264373351373200002665853028612451056578545711640558177340181847433846
EIP155_S = 46948507304638947509940763649030358759909902576025900602547168820602576006531
EIP155_SIGNED_TRANSACTION = (
    "0xf86c098504a817c800825208943535353535353535353535353535353535353535880de0b6b3a7640000"
    "8025a028ef61340bd939bc2195fe537567866003e1a15d3c71ff63e1590620aa636276a067cbe9d8997f"
    "761aecb703304b3800ccf555c9f3dc64214b297fb1966a3b6d83"
)

DEVNET_PRIVATE_KEY = "0x0fad2ca996a24d116097c481c27a59652a3d3611dfed64d8f9bf86568b1f431d"
DEVNET_SENDER = "0x0a265d1d68fd54b09d434de7846d8e631668d99b"
DEVNET_CHAIN_ID = 1337
AUTHORITY_PRIVATE_KEY = "0x" + "01" * 32
RECIPIENT = "0x" + "aa" * 20
DELEGATE = "0x" + "11" * 20


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        return self.payload


class FakeNode:
    """
    Answers the JSON-RPC requests sent through `requests.post`.
    """

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.chain_id = DEVNET_CHAIN_ID
        self.nonces: Dict[str, int] = {}
        self.errors: Dict[str, Dict[str, Any]] = {}
        self.status_code = 200

    @property
    def methods(self) -> List[str]:
        return [request["json"]["method"] for request in self.requests]

    def post(self, url, json=None, headers=None, timeout=None) -> FakeResponse:
        self.requests.append(dict(url=url, json=json, headers=headers, timeout=timeout))
        method = json["method"]
        if self.status_code != 200:
            return FakeResponse({}, status_code=self.status_code)
        if method in self.errors:
            return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "error": self.errors[method]})

        if method == "eth_chainId":
            result = hex(self.chain_id)
        elif method == "eth_getTransactionCount":
            result = hex(self.nonces.get(json["params"][0].lower(), 0))
        elif method == "eth_sendRawTransaction":
            result = str(keccak256(Bytes(json["params"][0])))
        else:
            return FakeResponse(
                {
                    "jsonrpc": "2.0",
                    "id": json["id"],
                    "error": {"code": -32601, "message": "the method does not exist"},
                }
            )
        return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "result": result})
