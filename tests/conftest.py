"""Shared fixtures: a deterministic identity and an in-process fake node."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from eth_hash.auto import keccak

from transmute.config import Config
from transmute.errors import RpcError
from transmute.pneuma.cancel import CancelToken
from transmute.sigil.eth import SigningIdentity

# Well-known development account (hardhat / anvil account #0).
DEV_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"

GWEI = 10**9


class FakeNode:
    """
    Stands in for RpcClient.

    Records every method call in ``calls``; signed transactions land in
    ``sent``.  ``call_results`` maps a 4-byte selector (0x-hex) to raw
    return bytes; ``estimate_errors`` maps a selector to a revert reason.
    """

    def __init__(
        self,
        nonce: int = 5,
        gas_price: int = 20 * GWEI,
        estimate: int = 21_000,
        chain_id: int = 1,
    ) -> None:
        self.nonce = nonce
        self.price = gas_price
        self.estimate = estimate
        self.chain = chain_id
        self.calls: list[tuple[str, Any]] = []
        self.sent: list[str] = []
        self.call_results: dict[str, bytes] = {}
        self.estimate_errors: dict[str, str] = {}
        self.send_error: Optional[str] = None
        self.receipt_status = 1
        self.gas_used = 21_000
        self.pending_polls = 0
        self.never_mine = False
        self.closed = False

    def _enter(self, method: str, arg: Any, cancel: Optional[CancelToken]) -> None:
        if cancel is not None:
            cancel.check(method)
        self.calls.append((method, arg))

    @property
    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]

    def chain_id(self, cancel=None) -> int:
        self._enter("eth_chainId", None, cancel)
        return self.chain

    def get_transaction_count(self, address, block="pending", cancel=None) -> int:
        self._enter("eth_getTransactionCount", address, cancel)
        return self.nonce

    def gas_price(self, cancel=None) -> int:
        self._enter("eth_gasPrice", None, cancel)
        return self.price

    def get_balance(self, address, block="latest", cancel=None) -> int:
        self._enter("eth_getBalance", address, cancel)
        return 0

    def estimate_gas(self, call, cancel=None) -> int:
        self._enter("eth_estimateGas", call, cancel)
        reason = self.estimate_errors.get(call["data"][:10])
        if reason is not None:
            raise RpcError("RPC error from eth_estimateGas", method="eth_estimateGas", code=3, node_message=reason)
        return self.estimate

    def call(self, call, block="latest", cancel=None) -> bytes:
        self._enter("eth_call", call, cancel)
        return self.call_results.get(call["data"][:10], b"")

    def send_raw_transaction(self, raw_tx, cancel=None) -> str:
        self._enter("eth_sendRawTransaction", raw_tx, cancel)
        if self.send_error is not None:
            raise RpcError(
                "RPC error from eth_sendRawTransaction",
                method="eth_sendRawTransaction",
                code=-32000,
                node_message=self.send_error,
            )
        self.sent.append(raw_tx)
        return "0x" + keccak(bytes.fromhex(raw_tx[2:])).hex()

    def get_transaction_receipt(self, tx_hash, cancel=None):
        self._enter("eth_getTransactionReceipt", tx_hash, cancel)
        if self.never_mine:
            return None
        if self.pending_polls > 0:
            self.pending_polls -= 1
            return None
        return {
            "transactionHash": tx_hash,
            "status": hex(self.receipt_status),
            "gasUsed": hex(self.gas_used),
            "blockNumber": hex(100 + len(self.sent)),
            "blockHash": "0x" + "ab" * 32,
        }

    def close(self) -> None:
        self.closed = True


class SpyIdentity(SigningIdentity):
    """SigningIdentity that counts signatures."""

    __slots__ = ("signed",)

    def __init__(self, private_key: str) -> None:
        super().__init__(private_key)
        self.signed = []

    def sign_transaction(self, tx, chain_id):
        self.signed.append(tx)
        return super().sign_transaction(tx, chain_id)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def identity() -> SpyIdentity:
    return SpyIdentity(DEV_PRIVATE_KEY)


@pytest.fixture()
def config() -> Config:
    return Config()
