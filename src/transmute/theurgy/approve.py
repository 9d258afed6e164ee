"""
Theurgy Approve - Let a spender (the router by default) move ERC-20 tokens.
"""

from __future__ import annotations

from typing import Optional

import click

from ..errors import TransmuteError
from .common import WETH, fail, node_options, open_clients, parse_address


@click.command()
@click.option("--amount", required=True, type=int, help="Allowance in token base units")
@click.option("--token", default=WETH, show_default=True, help="ERC-20 token address")
@click.option("--spender", default=None, help="Spender address (default: the router)")
@node_options
def approve(amount: int, token: str, spender: Optional[str], rpc_url: str, router: str) -> None:
    """Approve a spender for an ERC-20 token."""
    token_address = parse_address(token, "--token")
    spender_address = parse_address(spender or router, "--spender")
    try:
        with open_clients(rpc_url, router) as clients:
            outcome = clients.executor.approve(token_address, spender_address, amount)
    except TransmuteError as exc:
        fail(exc, "Approve")
    click.secho("SUCCESS: Approval confirmed!", fg="green")
    click.echo(f"  TX: {outcome.tx_hash}")
