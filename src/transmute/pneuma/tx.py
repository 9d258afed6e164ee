"""
Transaction Builder - assemble unsigned transactions.

The builder is pure: chain state (nonce, gas price, gas estimate) is
fetched by the caller and passed in.  Nonces are not tracked locally;
the node is the only counter.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..config import Config
from ..errors import EncodingError
from .abi import encode_call
from .types import CallIntent, ChainState, UnsignedTransaction


class TransactionBuilder:
    def __init__(self, config: Config, clock: Callable[[], float] = time.time) -> None:
        self.config = config
        self._clock = clock

    def encode(self, intent: CallIntent) -> bytes:
        return encode_call(intent.function, intent.args)

    def gas_limit(self, state: ChainState) -> int:
        """Fixed ceiling when given, else the node estimate plus the buffer."""
        if state.fixed_gas_limit is not None:
            return state.fixed_gas_limit
        return state.estimated_gas + self.config.gas_limit_buffer

    def check_value(self, intent: CallIntent, value: int) -> None:
        """Reject a negative value, or any value on a non-payable function."""
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise EncodingError(
                f"Transaction value must be a non-negative int, got {value!r}",
                target=intent.target.checksum,
            )
        if value and not intent.function.payable:
            raise EncodingError(
                f"{intent.function.signature} is not payable",
                target=intent.target.checksum,
            )

    def build(self, intent: CallIntent, value: int, state: ChainState) -> UnsignedTransaction:
        """
        Build an unsigned transaction for ``intent``.

        Args:
            intent: Target contract, function and arguments
            value: Native currency to attach, in wei
            state: Chain state reported by the node for this transaction

        Returns:
            UnsignedTransaction ready for signing
        """
        self.check_value(intent, value)
        return UnsignedTransaction(
            nonce=state.nonce,
            to=intent.target,
            value=value,
            gas=self.gas_limit(state),
            gas_price=state.gas_price,
            data=self.encode(intent),
        )

    def deadline(self, now: Optional[float] = None) -> int:
        """Unix timestamp (seconds) after which a swap must not execute."""
        now = self._clock() if now is None else now
        return int(now + self.config.deadline_duration.total_seconds())
