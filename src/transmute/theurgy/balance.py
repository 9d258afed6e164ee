"""
Theurgy Balance - Show native and ERC-20 balances of the signing address.
"""

from __future__ import annotations

import click

from ..errors import TransmuteError
from .common import WETH, fail, node_options, open_clients, parse_address


@click.command()
@click.option(
    "--token",
    "tokens",
    multiple=True,
    default=(WETH,),
    show_default=True,
    help="ERC-20 token address (repeatable)",
)
@node_options
def balance(tokens: tuple[str, ...], rpc_url: str, router: str) -> None:
    """Show native and token balances."""
    addresses = [parse_address(token, "--token") for token in tokens]
    try:
        with open_clients(rpc_url, router) as clients:
            click.echo(f"  Address: {clients.identity.address}")
            click.echo(f"  Native:  {clients.query.native_balance()} wei")
            for token in addresses:
                click.echo(f"  {token}: {clients.query.balance_of(token)}")
    except TransmuteError as exc:
        fail(exc)
