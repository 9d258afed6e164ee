"""
Theurgy Run - The whole swap sequence.

  1. quote amount_in along [token_in, token_out]
  2. apply slippage to get amountOutMin
  3. wrap amount_in of native currency into token_in
  4. approve the router for amount_in of token_in
  5. swap

Each step depends on the previous one; the first failure aborts the run.
"""

from __future__ import annotations

import click

from ..errors import TransmuteError
from ..pneuma.slippage import min_output
from .common import USDC, WETH, Clients, fail, node_options, open_clients, parse_address


def _log_balances(clients: Clients, token_in, token_out) -> None:
    click.echo(f"  input token balance:  {clients.query.balance_of(token_in)}")
    click.echo(f"  output token balance: {clients.query.balance_of(token_out)}")


@click.command()
@click.option("--amount-in", default=10**18, show_default=True, type=int, help="Amount to wrap and swap, in wei")
@click.option("--token-in", default=WETH, show_default=True, help="Wrapped native token (swap input)")
@click.option("--token-out", default=USDC, show_default=True, help="Swap output token")
@click.option("--slippage", default="1", show_default=True, help="Slippage tolerance in percent")
@node_options
def run(amount_in: int, token_in: str, token_out: str, slippage: str, rpc_url: str, router: str) -> None:
    """Quote, wrap, approve and swap."""
    token_in_address = parse_address(token_in, "--token-in")
    token_out_address = parse_address(token_out, "--token-out")
    path = [token_in_address, token_out_address]

    step = "Setup"
    try:
        with open_clients(rpc_url, router) as clients:
            step = "Quote"
            expected = clients.query.expected_amount_out(amount_in, path)
            amount_out_min = min_output(expected, slippage)
            click.echo(f"Expected amount out: {expected}  (min {amount_out_min} at {slippage}%)")

            step = "Wrap"
            click.echo("Minting wrapped token...")
            _log_balances(clients, token_in_address, token_out_address)
            clients.executor.wrap_native(token_in_address, amount_in)
            _log_balances(clients, token_in_address, token_out_address)

            step = "Approve"
            click.echo(f"Approving router to spend {token_in_address}...")
            clients.executor.approve(token_in_address, clients.executor.router, amount_in)

            step = "Swap"
            click.echo("Swapping tokens...")
            outcome = clients.executor.swap_exact_tokens_for_tokens(amount_in, amount_out_min, path)
            _log_balances(clients, token_in_address, token_out_address)
    except TransmuteError as exc:
        fail(exc, step)

    click.secho("SUCCESS: Swap sequence complete!", fg="green")
    click.echo(f"  TX: {outcome.tx_hash}")
