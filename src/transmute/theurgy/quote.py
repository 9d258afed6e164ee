"""
Theurgy Quote - Router quote for a swap path.

Prints every hop amount returned by getAmountsOut plus the minimum
output that a swap with the given slippage would accept.
"""

from __future__ import annotations

import click

from ..errors import TransmuteError
from ..pneuma.slippage import min_output
from .common import USDC, WETH, fail, node_options, open_clients, parse_address


@click.command()
@click.option("--amount-in", required=True, type=int, help="Input amount in token base units")
@click.option(
    "--path",
    "path",
    multiple=True,
    default=(WETH, USDC),
    show_default=True,
    help="Token address along the swap path (repeat, in order)",
)
@click.option("--slippage", default="1", show_default=True, help="Slippage tolerance in percent")
@node_options
def quote(amount_in: int, path: tuple[str, ...], slippage: str, rpc_url: str, router: str) -> None:
    """Quote a swap and its minimum acceptable output."""
    tokens = [parse_address(token, "--path") for token in path]
    try:
        with open_clients(rpc_url, router) as clients:
            amounts = clients.query.get_amounts_out(amount_in, tokens)
            for token, amount in zip(tokens, amounts):
                click.echo(f"  {token}: {amount}")
            expected = amounts[-1]
            click.echo(f"  Expected out: {expected}")
            click.echo(f"  Minimum out ({slippage}% slippage): {min_output(expected, slippage)}")
    except TransmuteError as exc:
        fail(exc)
