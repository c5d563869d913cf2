"""
Configuration loaded from a YAML file.

The file describes the nodes transactions are sent to and the default
transaction parameters used by the command line. Every value can be
overridden by a command line option.

Example `env.yaml`:

    remote_nodes:
      - name: devnet
        node_url: http://127.0.0.1:8545
    transaction:
      chain_id: 1337
      gas_limit: 21000
      gas_price: 1000000000
      to: "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
    log_level: INFO
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, HttpUrl, ValidationError

from .base_types import Address, Bytes, SecretKey

DEFAULT_CONFIG_PATH = Path("env.yaml")


class RemoteNode(BaseModel):
    """
    Represents a configuration for a remote node.

    Attributes:
    - name (str): The name of the remote node.
    - node_url (HttpUrl): The URL for the remote node, validated as a proper URL.
    - rpc_headers (Dict[str, str]): A dictionary of optional RPC headers, defaults to empty dict.

    """

    name: str = "local"
    node_url: HttpUrl = HttpUrl("http://127.0.0.1:8545")
    rpc_headers: Dict[str, str] = {}


class TransactionConfig(BaseModel):
    """Default values for the transactions built by the command line."""

    chain_id: Optional[int] = None
    gas_limit: int = 21_000
    gas_price: int = 1_000_000_000
    max_fee_per_gas: int = 2_000_000_000
    max_priority_fee_per_gas: int = 1_000_000_000
    to: Optional[Address] = None
    value: int = 0
    data: Bytes = Bytes(b"")
    private_key: Optional[SecretKey] = None
    delegate: Optional[Address] = None
    authority_key: Optional[SecretKey] = None


class Config(BaseModel):
    """
    Represents the overall configuration.

    Attributes:
    - remote_nodes (List[RemoteNode]): A list of remote node configurations.
    - transaction (TransactionConfig): Defaults for the transactions to build.
    - log_level (str): Level used when the command line configures logging.

    """

    remote_nodes: List[RemoteNode] = [RemoteNode()]
    transaction: TransactionConfig = TransactionConfig()
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> "Config":
        """Load and validate a configuration file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"The configuration file '{path}' does not exist.")

        with path.open("r") as file:
            try:
                config_data = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid configuration: {e}") from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError(f"Invalid configuration: expected a mapping in '{path}'")
        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def node(self, name: Optional[str] = None) -> RemoteNode:
        """Return the node with the given name, or the first configured node."""
        if not self.remote_nodes:
            raise ValueError("no remote nodes are configured")
        if name is None:
            return self.remote_nodes[0]
        for node in self.remote_nodes:
            if node.name == name:
                return node
        raise ValueError(f"unknown remote node '{name}'")
