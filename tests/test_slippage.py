"""Tests for minimum-output slippage math."""

from __future__ import annotations

from decimal import Decimal

import pytest

from transmute.errors import InvalidSlippage
from transmute.pneuma.slippage import min_output, parse_slippage

AMOUNTS = [0, 1, 99, 10**6, 10**18, 123456789012345678901234567890, 2**256 - 1]


@pytest.mark.parametrize("amount", AMOUNTS)
def test_zero_slippage_is_identity(amount: int) -> None:
    assert min_output(amount, 0) == amount


@pytest.mark.parametrize("amount", AMOUNTS)
def test_full_slippage_is_zero(amount: int) -> None:
    assert min_output(amount, 100) == 0


@pytest.mark.parametrize("amount", AMOUNTS)
def test_monotonically_non_increasing(amount: int) -> None:
    steps = [Decimal(n) / 4 for n in range(0, 401)]
    results = [min_output(amount, step) for step in steps]
    assert all(a >= b for a, b in zip(results, results[1:]))


def test_one_percent_of_one_ether() -> None:
    assert min_output(10**18, 1) == 99 * 10**16


def test_floors_instead_of_rounding() -> None:
    assert min_output(199, 1) == 197  # 197.01
    assert min_output(1, 50) == 0


def test_exact_on_large_values() -> None:
    # 0.3% of a value past float precision
    amount = 10**30 + 7
    assert min_output(amount, "0.3") == (amount * 997) // 1000


def test_float_uses_decimal_repr() -> None:
    assert min_output(10**18, 0.5) == 995 * 10**15
    assert parse_slippage(0.1) == parse_slippage("0.1")


@pytest.mark.parametrize("bad", [-1, 101, 10**6, "-0.0001", "100.0001", Decimal("1e6")])
def test_out_of_range(bad) -> None:
    with pytest.raises(InvalidSlippage):
        min_output(10**18, bad)


@pytest.mark.parametrize("bad", ["abc", "", float("nan"), float("inf"), Decimal("NaN"), True, None, [1]])
def test_not_a_number(bad) -> None:
    with pytest.raises(InvalidSlippage):
        min_output(10**18, bad)


def test_invalid_slippage_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        min_output(1, 101)


@pytest.mark.parametrize("bad", [-1, 1.5, "10", True])
def test_rejects_bad_expected_output(bad) -> None:
    with pytest.raises(ValueError):
        min_output(bad, 1)
