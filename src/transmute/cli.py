"""
Transmute CLI

Command-line runner for the wrap -> approve -> swap workflow against a
Uniswap V2 style router.

Commands:
  whoami   - Show the signing address
  balance  - Show native and ERC-20 balances
  quote    - Quote a swap and the minimum output under slippage
  wrap     - Wrap native currency (WETH deposit)
  approve  - Approve a spender for an ERC-20 token
  swap     - Swap exact input tokens through the router
  run      - Quote, wrap, approve and swap in one sequence
"""

from __future__ import annotations

import logging
import sys

import click

from .errors import TransmuteError
from .sigil.eth import SigningIdentity, load_private_key


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("T R A N S M U T E", fg="bright_white", bold=True)
        + click.style(f"  v{VERSION}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="transmute")
@click.option("-v", "--verbose", is_flag=True, help="Log RPC traffic at DEBUG level")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Transmute: wrap, approve and swap through a DEX router."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.balance import balance
from .theurgy.quote import quote
from .theurgy.wrap import wrap
from .theurgy.approve import approve
from .theurgy.swap import swap
from .theurgy.run import run

cli.add_command(balance)
cli.add_command(quote)
cli.add_command(wrap)
cli.add_command(approve)
cli.add_command(swap)
cli.add_command(run)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the signing address."""
    try:
        identity = SigningIdentity(load_private_key())
    except TransmuteError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        click.echo("Set PRIVATE_KEY in the environment or in ~/.transmute/.env")
        sys.exit(exc.exit_code)
    click.echo(f"Address: {identity.address}")
