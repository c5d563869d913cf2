from pathlib import Path

import pytest

from ethereum_tx_builder.config import Config, RemoteNode, TransactionConfig

CONFIG = """
remote_nodes:
  - name: devnet
    node_url: http://127.0.0.1:8545
    rpc_headers:
      client-secret: secret
  - name: sepolia
    node_url: https://rpc.sepolia.example.org
transaction:
  chain_id: 1337
  gas_limit: 50000
  to: "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
  value: 1000000000000000000
  private_key: "0x4646464646464646464646464646464646464646464646464646464646464646"
  delegate: "0x1111111111111111111111111111111111111111"
log_level: DEBUG
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "env.yaml"
    path.write_text(CONFIG)
    return path


def test_load_config(config_file: Path) -> None:
    config = Config.from_yaml(config_file)
    assert config.log_level == "DEBUG"
    assert [node.name for node in config.remote_nodes] == ["devnet", "sepolia"]
    assert config.node().name == "devnet"
    assert str(config.node("devnet").node_url).startswith("http://127.0.0.1:8545")
    assert config.node("devnet").rpc_headers == {"client-secret": "secret"}
    assert config.node("sepolia").rpc_headers == {}

    transaction = config.transaction
    assert transaction.chain_id == 1337
    assert transaction.gas_limit == 50000
    assert transaction.gas_price == 1_000_000_000
    assert transaction.to == "0x" + "aa" * 20
    assert transaction.value == 10**18
    assert transaction.data == b""
    assert bytes(transaction.private_key) == b"\x46" * 32
    assert transaction.delegate == "0x" + "11" * 20
    assert transaction.authority_key is None


def test_private_key_is_not_serialized_in_clear(config_file: Path) -> None:
    config = Config.from_yaml(config_file)
    assert "46" * 32 not in repr(config)


def test_unknown_node(config_file: Path) -> None:
    with pytest.raises(ValueError):
        Config.from_yaml(config_file).node("mainnet")


def test_no_nodes() -> None:
    with pytest.raises(ValueError):
        Config(remote_nodes=[]).node()


def test_defaults(tmp_path: Path) -> None:
    path = tmp_path / "env.yaml"
    path.write_text("")
    config = Config.from_yaml(path)
    assert config == Config()
    assert config.remote_nodes == [RemoteNode()]
    assert config.transaction == TransactionConfig()
    assert config.transaction.chain_id is None


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Config.from_yaml(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("remote_nodes:\n  - node_url: not a url\n", id="invalid_url"),
        pytest.param("transaction:\n  to: '0x1234'\n", id="short_address"),
        pytest.param("transaction:\n  gas_limit: lots\n", id="invalid_number"),
        pytest.param("- a\n- b\n", id="not_a_mapping"),
        pytest.param("remote_nodes: [\n", id="invalid_yaml"),
    ],
)
def test_invalid_config(tmp_path: Path, content: str) -> None:
    path = tmp_path / "env.yaml"
    path.write_text(content)
    with pytest.raises(ValueError):
        Config.from_yaml(path)
