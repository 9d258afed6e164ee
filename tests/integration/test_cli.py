"""
CLI integration tests using Click's test runner.

The node is replaced by the in-process fake from conftest, so the whole
quote -> wrap -> approve -> swap sequence runs without network access.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import eth_abi
import pytest
from click.testing import CliRunner

from transmute.cli import cli
from transmute.pneuma.abi import APPROVE, BALANCE_OF, GET_AMOUNTS_OUT

PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Wallet in the environment, no ~/.transmute/.env, default config."""
    monkeypatch.setenv("PRIVATE_KEY", PRIVATE_KEY)
    for name in ("TRANSMUTE_GAS_LIMIT_BUFFER", "TRANSMUTE_SWAP_GAS_LIMIT", "TRANSMUTE_DEADLINE_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    with patch("transmute.sigil.eth.TRANSMUTE_ENV", tmp_path / ".env"):
        yield


@pytest.fixture()
def chain(node, env):
    """Fake node wired in place of the JSON-RPC client."""
    node.call_results["0x" + GET_AMOUNTS_OUT.selector.hex()] = eth_abi.encode(
        ["uint256[]"], [[10**18, 3_000_000_000]]
    )
    node.call_results["0x" + BALANCE_OF.selector.hex()] = eth_abi.encode(["uint256"], [0])
    with patch("transmute.theurgy.common.make_rpc", return_value=node):
        yield node


class TestBasics:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        for command in ("quote", "wrap", "approve", "swap", "run"):
            assert command in result.output

    def test_whoami(self, runner: CliRunner, env) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert f"Address: {ADDRESS}" in result.output

    def test_whoami_without_wallet(self, runner: CliRunner, env, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PRIVATE_KEY")
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 2
        assert "PRIVATE_KEY not found" in result.output


class TestCommands:
    def test_quote(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["quote", "--amount-in", str(10**18), "--slippage", "1"])
        assert result.exit_code == 0, result.output
        assert "Expected out: 3000000000" in result.output
        assert "Minimum out (1% slippage): 2970000000" in result.output

    def test_quote_invalid_slippage(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["quote", "--amount-in", "1", "--slippage", "101"])
        assert result.exit_code == 11
        assert "Slippage" in result.output

    def test_bad_address_option(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["wrap", "--amount", "1", "--token", "0x1234"])
        assert result.exit_code == 2
        assert chain.calls == []

    def test_balance(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["balance"])
        assert result.exit_code == 0, result.output
        assert f"Address: {ADDRESS}" in result.output
        assert "Native:  0 wei" in result.output
        assert "eth_sendRawTransaction" not in chain.methods

    def test_negative_wrap_exits_cleanly(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["wrap", "--amount", "-1"])
        assert result.exit_code == 3
        assert "Wrap failed" in result.output
        assert chain.calls == []

    def test_approve(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["approve", "--amount", "5"])
        assert result.exit_code == 0, result.output
        assert "Approval confirmed" in result.output
        assert len(chain.sent) == 1
        assert chain.closed

    def test_swap_with_explicit_minimum_skips_quote(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["swap", "--amount-in", "100", "--amount-out-min", "1"])
        assert result.exit_code == 0, result.output
        assert "eth_call" not in chain.methods
        assert "eth_estimateGas" not in chain.methods


class TestRun:
    def test_full_sequence(self, runner: CliRunner, chain) -> None:
        result = runner.invoke(cli, ["run", "--amount-in", str(10**18)])
        assert result.exit_code == 0, result.output
        assert "Swap sequence complete" in result.output
        assert len(chain.sent) == 3
        # wrap and approve are estimated, the swap uses the fixed ceiling
        assert chain.methods.count("eth_estimateGas") == 2

    def test_aborts_on_first_failure(self, runner: CliRunner, chain) -> None:
        chain.estimate_errors["0x" + APPROVE.selector.hex()] = "execution reverted"
        result = runner.invoke(cli, ["run"])
        assert result.exit_code == 6
        assert "Approve failed" in result.output
        assert len(chain.sent) == 1  # only the wrap went out

    def test_missing_key_fails_at_startup(self, runner: CliRunner, chain, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PRIVATE_KEY")
        result = runner.invoke(cli, ["run"])
        assert result.exit_code == 2
        assert chain.calls == []
