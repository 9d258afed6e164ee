"""Options and client wiring shared by the theurgy commands."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Callable, Iterator, NamedTuple, Optional

import click

from ..config import load_config
from ..errors import TransmuteError
from ..pneuma.client import ExecutionClient
from ..pneuma.query import QueryClient
from ..pneuma.rpc import DEFAULT_RPC_URL, RpcClient
from ..pneuma.types import Address
from ..sigil.eth import SigningIdentity, load_private_key

UNISWAP_V2_ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


class Clients(NamedTuple):
    identity: SigningIdentity
    executor: ExecutionClient
    query: QueryClient


def node_options(func: Callable) -> Callable:
    """Attach --rpc-url and --router to a command."""
    func = click.option(
        "--router",
        envvar="TRANSMUTE_ROUTER",
        default=UNISWAP_V2_ROUTER,
        show_default=True,
        help="Router contract address",
    )(func)
    func = click.option(
        "--rpc-url",
        envvar="TRANSMUTE_RPC_URL",
        default=DEFAULT_RPC_URL,
        show_default=True,
        help="Node JSON-RPC endpoint",
    )(func)
    return func


def make_rpc(rpc_url: str) -> RpcClient:
    return RpcClient(rpc_url)


@contextmanager
def open_clients(rpc_url: str, router: str) -> Iterator[Clients]:
    """Load key and config, connect to the node, and yield the clients."""
    identity = SigningIdentity(load_private_key())
    config = load_config()
    rpc = make_rpc(rpc_url)
    try:
        yield Clients(
            identity=identity,
            executor=ExecutionClient(rpc, identity, router, config),
            query=QueryClient(rpc, router, account=identity.address),
        )
    finally:
        rpc.close()


def parse_address(value: str, name: str) -> Address:
    try:
        return Address.from_hex(value)
    except TransmuteError:
        raise click.BadParameter(f"not a hex address: {value}", param_hint=name) from None


def fail(exc: TransmuteError, step: Optional[str] = None) -> None:
    prefix = f"{step} failed" if step else "ERROR"
    click.secho(f"{prefix}: {exc}", fg="red")
    sys.exit(exc.exit_code)
