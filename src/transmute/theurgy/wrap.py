"""
Theurgy Wrap - Deposit native currency into the wrapped-token contract.
"""

from __future__ import annotations

import click

from ..errors import TransmuteError
from .common import WETH, fail, node_options, open_clients, parse_address


@click.command()
@click.option("--amount", required=True, type=int, help="Amount to wrap, in wei")
@click.option("--token", default=WETH, show_default=True, help="Wrapped native token address")
@node_options
def wrap(amount: int, token: str, rpc_url: str, router: str) -> None:
    """Wrap native currency (deposit)."""
    token_address = parse_address(token, "--token")
    try:
        with open_clients(rpc_url, router) as clients:
            outcome = clients.executor.wrap_native(token_address, amount)
    except TransmuteError as exc:
        fail(exc, "Wrap")
    click.secho("SUCCESS: Wrap confirmed!", fg="green")
    click.echo(f"  TX: {outcome.tx_hash}")
    click.echo(f"  Block: {outcome.block_number}  Gas used: {outcome.gas_used}")
