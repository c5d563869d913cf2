"""
`txbuild` builds, signs and broadcasts Ethereum transactions.

Invoke using `txbuild --help`.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
import requests
from click.core import ParameterSource

from .base_types import Address, Bytes
from .config import Config
from .conversions import to_number
from .exceptions import TransactionBuilderException
from .logging import LogLevel, configure_logging, get_logger
from .rpc import EthRPC, JSONRPCError, SendTransactionExceptionError
from .signing import TransactionSigner
from .transactions import build_transaction, to_raw_transaction_hex, transaction_hash

logger = get_logger(__name__)

CLI_ERRORS = (
    TransactionBuilderException,
    JSONRPCError,
    SendTransactionExceptionError,
    requests.RequestException,
    FileNotFoundError,
    ValueError,
)


class NumberParamType(click.ParamType):
    """Integer option accepting decimal or `0x` prefixed hexadecimal values."""

    name = "number"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]):
        """Parse the value into a non-negative integer."""
        if isinstance(value, int):
            return value
        try:
            number = to_number(value)
        except (TypeError, ValueError):
            self.fail(f"{value!r} is not a valid number", param, ctx)
        if number < 0:
            self.fail(f"{value!r} must not be negative", param, ctx)
        return number


class AddressParamType(click.ParamType):
    """A 20-byte hex address option."""

    name = "address"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]):
        """Parse the value into an `Address`."""
        try:
            return Address(value)
        except (TypeError, ValueError):
            self.fail(f"{value!r} is not a 20-byte address", param, ctx)


NUMBER = NumberParamType()
ADDRESS = AddressParamType()


@click.group(context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120))
@click.option(
    "--log-level",
    default="INFO",
    show_default=True,
    help="Logging level (DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL or a number).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the log to this file.",
)
def txbuild(log_level: str, log_file: Optional[Path]):
    """
    `txbuild` builds, signs and broadcasts Ethereum transactions.
    """
    try:
        configure_logging(log_level=log_level, log_file=log_file)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e


@txbuild.command(short_help="Print the address controlled by a private key.")
@click.option(
    "--private-key",
    envvar="TXBUILD_PRIVATE_KEY",
    required=True,
    help="Hex encoded secp256k1 private key.",
)
def address(private_key: str):
    """
    Derive and print the account address of PRIVATE_KEY.
    """
    try:
        signer = TransactionSigner(private_key)
    except TransactionBuilderException as e:
        logger.error("invalid private key: %s", e)
        raise click.ClickException(str(e)) from e
    click.echo(str(signer.address))


@txbuild.command(short_help="Build, sign and broadcast a transaction.")
@click.argument("kind", type=click.Choice(["legacy", "eip1559", "eip7702"]))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file with nodes and transaction defaults.",
)
@click.option("--node", default=None, help="Name of the configured node to use.")
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint, overrides the configured node.")
@click.option(
    "--private-key",
    envvar="TXBUILD_PRIVATE_KEY",
    default=None,
    help="Hex encoded private key of the sender.",
)
@click.option("--to", type=ADDRESS, default=None, help="Recipient address.")
@click.option("--value", type=NUMBER, default=None, help="Value to transfer, in wei.")
@click.option("--data", default=None, help="Hex encoded call data.")
@click.option("--chain-id", type=NUMBER, default=None, help="Chain id, queried if omitted.")
@click.option("--nonce", type=NUMBER, default=None, help="Sender nonce, queried if omitted.")
@click.option("--gas-limit", type=NUMBER, default=None)
@click.option("--gas-price", type=NUMBER, default=None, help="Legacy transactions only.")
@click.option("--max-fee-per-gas", type=NUMBER, default=None)
@click.option("--max-priority-fee-per-gas", type=NUMBER, default=None)
@click.option("--delegate", type=ADDRESS, default=None, help="EIP-7702 delegation target.")
@click.option(
    "--authority-key",
    envvar="TXBUILD_AUTHORITY_KEY",
    default=None,
    help="Private key signing the EIP-7702 authorization, defaults to the sender key.",
)
@click.option("--auth-chain-id", type=NUMBER, default=None, help="Authorization chain id.")
@click.option("--auth-nonce", type=NUMBER, default=None, help="Authorization nonce.")
@click.option("--dry-run", is_flag=True, help="Print the signed transaction without sending it.")
@click.pass_context
def send(
    ctx: click.Context,
    kind: str,
    config_path: Optional[Path],
    node: Optional[str],
    rpc_url: Optional[str],
    private_key: Optional[str],
    to: Optional[Address],
    value: Optional[int],
    data: Optional[str],
    chain_id: Optional[int],
    nonce: Optional[int],
    gas_limit: Optional[int],
    gas_price: Optional[int],
    max_fee_per_gas: Optional[int],
    max_priority_fee_per_gas: Optional[int],
    delegate: Optional[Address],
    authority_key: Optional[str],
    auth_chain_id: Optional[int],
    auth_nonce: Optional[int],
    dry_run: bool,
):
    """
    Build a KIND transaction, sign it and send it to the node.

    KIND is one of `legacy`, `eip1559` or `eip7702`. Values that are not
    given as options are taken from the configuration file; the nonce and
    the chain id are queried from the node when neither provides them.

    Example: Send 1 ETH on a local development chain

        \b
        txbuild send legacy --rpc-url http://127.0.0.1:8545 \\
            --private-key 0x... --to 0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa \\
            --value 1000000000000000000 --chain-id 1337
    """  # noqa: D301
    try:
        config = Config.from_yaml(config_path) if config_path is not None else Config()
        if (
            config_path is not None
            and ctx.parent is not None
            and ctx.parent.get_parameter_source("log_level") is ParameterSource.DEFAULT
        ):
            logging.getLogger().setLevel(LogLevel.from_cli(config.log_level))

        defaults = config.transaction
        key = private_key if private_key is not None else defaults.private_key
        if key is None:
            raise click.UsageError("No private key provided, use --private-key to specify one")
        signer = TransactionSigner(key)
        logger.info("sender address: %s", signer.address)

        if rpc_url is None:
            remote_node = config.node(node)
            rpc = EthRPC(str(remote_node.node_url), extra_headers=remote_node.rpc_headers)
        else:
            rpc = EthRPC(rpc_url)

        if nonce is None:
            nonce = rpc.get_transaction_count(signer.address)
        logger.info("nonce: %d", nonce)
        if chain_id is None:
            chain_id = defaults.chain_id if defaults.chain_id is not None else rpc.chain_id()

        if to is None:
            to = defaults.to
        if to is None:
            if kind != "eip7702":
                raise click.UsageError("No recipient provided, use --to to specify one")
            to = signer.address

        fields: Dict[str, Any] = dict(
            chain_id=chain_id,
            nonce=nonce,
            gas_limit=gas_limit if gas_limit is not None else defaults.gas_limit,
            to=to,
            value=value if value is not None else defaults.value,
            data=Bytes(data) if data is not None else defaults.data,
        )
        if kind == "legacy":
            fields["gas_price"] = gas_price if gas_price is not None else defaults.gas_price
        else:
            fields["max_fee_per_gas"] = (
                max_fee_per_gas if max_fee_per_gas is not None else defaults.max_fee_per_gas
            )
            fields["max_priority_fee_per_gas"] = (
                max_priority_fee_per_gas
                if max_priority_fee_per_gas is not None
                else defaults.max_priority_fee_per_gas
            )

        if kind == "eip7702":
            if delegate is None:
                delegate = defaults.delegate
            if delegate is None:
                raise click.UsageError("No delegation target provided, use --delegate")
            if authority_key is None:
                authority_key = defaults.authority_key
            authority = TransactionSigner(authority_key) if authority_key is not None else signer
            if auth_nonce is None:
                if authority.address == signer.address:
                    # The sender nonce is incremented before the authorization is processed
                    auth_nonce = nonce + 1
                else:
                    auth_nonce = rpc.get_transaction_count(authority.address)
            authorization = authority.authorize(
                chain_id=auth_chain_id if auth_chain_id is not None else chain_id,
                address=delegate,
                nonce=auth_nonce,
            )
            logger.info(
                "authorization from %s delegating to %s with nonce %d",
                authority.address,
                delegate,
                auth_nonce,
            )
            fields["authorizations"] = (authorization,)

        tx = signer.sign(build_transaction(kind, **fields))
        raw_transaction = to_raw_transaction_hex(tx)
        click.echo(raw_transaction)

        if dry_run:
            logger.info("dry run, transaction %s not sent", transaction_hash(tx))
            return
        click.echo(str(rpc.send_raw_transaction(raw_transaction)))
    except CLI_ERRORS as e:
        logger.error("%s: %s", type(e).__name__, e)
        raise click.ClickException(str(e)) from e
