"""
Swap Math - minimum acceptable output under a slippage tolerance.

Everything is done on exact rationals.  Token amounts are routinely on
the 10**18 scale, where a float cannot even represent the input.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Union

from ..errors import InvalidSlippage

SlippageLike = Union[int, Decimal, str, float, Fraction]


def parse_slippage(slippage_percent: SlippageLike) -> Fraction:
    """
    Convert a slippage percentage to an exact Fraction in [0, 100].

    Floats go through their shortest decimal repr, so ``0.5`` means
    exactly one half.

    Raises:
        InvalidSlippage: Outside [0, 100], not a number, NaN or infinite
    """
    if isinstance(slippage_percent, bool):
        raise InvalidSlippage(f"Slippage must be a number, got {slippage_percent!r}")

    if isinstance(slippage_percent, (int, Fraction)):
        value = Fraction(slippage_percent)
    elif isinstance(slippage_percent, (float, str, Decimal)):
        try:
            dec = Decimal(repr(slippage_percent)) if isinstance(slippage_percent, float) else Decimal(slippage_percent)
        except (InvalidOperation, ValueError):
            raise InvalidSlippage(f"Slippage must be a number, got {slippage_percent!r}") from None
        if not dec.is_finite():
            raise InvalidSlippage(f"Slippage must be finite, got {slippage_percent!r}")
        value = Fraction(dec)
    else:
        raise InvalidSlippage(f"Slippage must be a number, got {slippage_percent!r}")

    if value < 0 or value > 100:
        raise InvalidSlippage(f"Slippage must be within [0, 100] percent, got {slippage_percent}")
    return value


def min_output(expected_output: int, slippage_percent: SlippageLike) -> int:
    """
    floor(expected_output * (100 - slippage_percent) / 100).

    Args:
        expected_output: Quoted output amount in token base units
        slippage_percent: Tolerance in percent, 0..100 inclusive

    Returns:
        Minimum output to pass as amountOutMin
    """
    if not isinstance(expected_output, int) or isinstance(expected_output, bool):
        raise ValueError(f"Expected output must be an int, got {expected_output!r}")
    if expected_output < 0:
        raise ValueError("Expected output must be non-negative")

    slippage = parse_slippage(slippage_percent)
    scaled = expected_output * (100 - slippage)
    return scaled.numerator // (scaled.denominator * 100)
