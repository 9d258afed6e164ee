"""
Theurgy Swap - swapExactTokensForTokens through the router.

The minimum output is either given directly or derived from a fresh
quote and a slippage tolerance.
"""

from __future__ import annotations

from typing import Optional

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
@click.option("--amount-out-min", type=int, default=None, help="Minimum output; skips the quote")
@click.option("--slippage", default="1", show_default=True, help="Slippage tolerance in percent")
@node_options
def swap(
    amount_in: int,
    path: tuple[str, ...],
    amount_out_min: Optional[int],
    slippage: str,
    rpc_url: str,
    router: str,
) -> None:
    """Swap exact input tokens through the router."""
    tokens = [parse_address(token, "--path") for token in path]
    try:
        with open_clients(rpc_url, router) as clients:
            if amount_out_min is None:
                expected = clients.query.expected_amount_out(amount_in, tokens)
                amount_out_min = min_output(expected, slippage)
                click.echo(f"  Expected out: {expected}  Minimum out: {amount_out_min}")
            outcome = clients.executor.swap_exact_tokens_for_tokens(amount_in, amount_out_min, tokens)
    except TransmuteError as exc:
        fail(exc, "Swap")
    click.secho("SUCCESS: Swap confirmed!", fg="green")
    click.echo(f"  TX: {outcome.tx_hash}")
