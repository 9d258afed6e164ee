"""
Execution Client - encode, price, sign, submit and confirm transactions.

Each mutating operation runs the same pipeline:

    encode -> nonce / gas price / gas estimate -> build -> sign
           -> eth_sendRawTransaction -> poll for the receipt

and either returns a successful ``TransactionOutcome`` or raises a typed
error.  Nothing is retried here: resubmitting a signed transaction is the
caller's decision.  One client must only be driven by one sequence of
operations at a time, since the nonce is read from the node.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Sequence, Union

from ..config import Config
from ..errors import (
    ConfirmationTimeout,
    EstimationFailed,
    MalformedResponse,
    NodeUnavailable,
    RpcError,
    SubmissionRejected,
    TransactionReverted,
    TransmuteError,
)
from ..sigil.eth import SigningIdentity
from .abi import APPROVE, DEPOSIT, SWAP_EXACT_TOKENS_FOR_TOKENS
from .cancel import CancelToken
from .rpc import RpcClient, call_object
from .tx import TransactionBuilder
from .types import Address, CallIntent, ChainState, SignedTransaction, TransactionOutcome

logger = logging.getLogger(__name__)

AddressLike = Union[Address, str]

DEFAULT_CONFIRMATION_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 2.0


class ExecutionClient:
    """
    Args:
        rpc: Node client
        identity: Signing identity that pays for and signs every transaction
        router: Router contract targeted by swaps
        config: Gas buffer, swap gas ceiling and deadline window
        builder: Override the transaction builder (tests inject a clock)
    """

    def __init__(
        self,
        rpc: RpcClient,
        identity: SigningIdentity,
        router: AddressLike,
        config: Optional[Config] = None,
        builder: Optional[TransactionBuilder] = None,
    ) -> None:
        self.rpc = rpc
        self.identity = identity
        self.router = Address.coerce(router)
        self.config = config or Config()
        self.builder = builder or TransactionBuilder(self.config)
        self._chain_id: Optional[int] = None

    @property
    def address(self) -> Address:
        return self.identity.address

    # ============ Operations ============

    def wrap_native(self, token: AddressLike, amount: int, **kwargs: Any) -> TransactionOutcome:
        """Deposit ``amount`` wei of native currency into the wrapped-token contract."""
        intent = CallIntent(Address.coerce(token), DEPOSIT, ())
        return self.execute(intent, value=amount, operation="wrap", **kwargs)

    def approve(
        self, token: AddressLike, spender: AddressLike, amount: int, **kwargs: Any
    ) -> TransactionOutcome:
        """Allow ``spender`` to move ``amount`` of ``token`` from this account."""
        intent = CallIntent(Address.coerce(token), APPROVE, (Address.coerce(spender), amount))
        return self.execute(intent, operation="approve", **kwargs)

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[AddressLike],
        recipient: Optional[AddressLike] = None,
        **kwargs: Any,
    ) -> TransactionOutcome:
        """
        Swap exactly ``amount_in`` along ``path`` through the router.

        Uses the configured fixed gas ceiling instead of estimation, and
        embeds ``now + deadline_duration`` as the swap deadline.
        """
        path = [Address.coerce(token) for token in path]
        to = Address.coerce(recipient) if recipient is not None else self.address
        deadline = self.builder.deadline()
        intent = CallIntent(
            self.router,
            SWAP_EXACT_TOKENS_FOR_TOKENS,
            (amount_in, amount_out_min, path, to, deadline),
        )
        logger.info("Swapping %s along %s (min out %s)", amount_in, [str(p) for p in path], amount_out_min)
        return self.execute(
            intent,
            operation="swap",
            fixed_gas_limit=self.config.swap_gas_limit,
            **kwargs,
        )

    # ============ Pipeline ============

    def execute(
        self,
        intent: CallIntent,
        value: int = 0,
        fixed_gas_limit: Optional[int] = None,
        operation: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
        timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> TransactionOutcome:
        """
        Run one mutating call to completion.

        Raises:
            EncodingError: Arguments do not fit the function
            EstimationFailed: The node says the call would revert
            SubmissionRejected: The node refused the signed transaction
            TransactionReverted: Mined, but execution failed
            ConfirmationTimeout: No receipt within ``timeout`` seconds
            Cancelled: ``cancel`` fired during any node request
            RpcError: Any other node failure
        """
        operation = operation or intent.function.name
        target = intent.target.checksum
        try:
            self.builder.check_value(intent, value)
            calldata = self.builder.encode(intent)

            state = self._chain_state(intent, calldata, value, fixed_gas_limit, operation, cancel)
            unsigned = self.builder.build(intent, value, state)
            signed = self.identity.sign_transaction(unsigned, self._get_chain_id(cancel))

            tx_hash = self._submit(signed, operation, target, cancel)
            logger.info("Transaction sent: %s (%s -> %s)", tx_hash, operation, target)

            outcome = self.wait_for_outcome(
                tx_hash,
                timeout=timeout,
                poll_interval=poll_interval,
                cancel=cancel,
                operation=operation,
                target=target,
            )
        except TransmuteError as exc:
            exc.operation = exc.operation or operation
            exc.target = exc.target or target
            raise

        logger.info(
            "Transaction receipt status: %s (%s, gas used %s)",
            1 if outcome.success else 0,
            tx_hash,
            outcome.gas_used,
        )
        if not outcome.success:
            raise TransactionReverted(
                f"Transaction {tx_hash} reverted",
                outcome=outcome,
                operation=operation,
                target=target,
            )
        return outcome

    def wait_for_outcome(
        self,
        tx_hash: str,
        timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        cancel: Optional[CancelToken] = None,
        operation: Optional[str] = None,
        target: Optional[str] = None,
    ) -> TransactionOutcome:
        """
        Poll for the receipt of ``tx_hash``.

        Raises:
            ConfirmationTimeout: No receipt within ``timeout`` seconds
            Cancelled: ``cancel`` fired while waiting
        """
        cancel = cancel or CancelToken()
        start = time.monotonic()
        while True:
            receipt = self.rpc.get_transaction_receipt(tx_hash, cancel=cancel)
            if receipt is not None:
                return _outcome(tx_hash, receipt, operation)
            remaining = timeout - (time.monotonic() - start)
            if remaining <= 0:
                break
            cancel.sleep(min(poll_interval, remaining))
            cancel.check(operation or "wait_for_receipt")

        raise ConfirmationTimeout(
            f"Transaction {tx_hash} not confirmed within {timeout}s",
            tx_hash=tx_hash,
            operation=operation,
            target=target,
        )

    def _chain_state(
        self,
        intent: CallIntent,
        calldata: bytes,
        value: int,
        fixed_gas_limit: Optional[int],
        operation: str,
        cancel: Optional[CancelToken],
    ) -> ChainState:
        nonce = self.rpc.get_transaction_count(self.address, cancel=cancel)
        gas_price = self.rpc.gas_price(cancel=cancel)
        if fixed_gas_limit is not None:
            return ChainState(nonce=nonce, gas_price=gas_price, fixed_gas_limit=fixed_gas_limit)

        call = call_object(intent.target, calldata, sender=self.address, value=value)
        try:
            estimate = self.rpc.estimate_gas(call, cancel=cancel)
        except NodeUnavailable:
            raise
        except RpcError as exc:
            logger.warning("Gas estimation failed for %s: %s", operation, exc.node_message)
            raise EstimationFailed(
                "Gas estimation failed; the call would revert",
                operation=operation,
                target=intent.target.checksum,
                node_message=exc.node_message,
            ) from exc
        return ChainState(nonce=nonce, gas_price=gas_price, estimated_gas=estimate)

    def _submit(
        self,
        signed: SignedTransaction,
        operation: str,
        target: str,
        cancel: Optional[CancelToken],
    ) -> str:
        try:
            tx_hash = self.rpc.send_raw_transaction(signed.raw_hex, cancel=cancel)
        except NodeUnavailable:
            # The node may or may not have taken it; do not guess.
            logger.warning("Submission of %s for %s had no reply", signed.hash, operation)
            raise
        except RpcError as exc:
            logger.warning("Node rejected %s for %s: %s", signed.hash, operation, exc.node_message)
            raise SubmissionRejected(
                "Node rejected the transaction",
                operation=operation,
                target=target,
                node_message=exc.node_message,
            ) from exc

        if tx_hash.lower() != signed.hash.lower():
            raise MalformedResponse(
                f"Node returned hash {tx_hash}, expected {signed.hash}",
                operation=operation,
                target=target,
            )
        return signed.hash

    def _get_chain_id(self, cancel: Optional[CancelToken]) -> int:
        if self._chain_id is None:
            self._chain_id = self.rpc.chain_id(cancel=cancel)
        return self._chain_id


def _outcome(tx_hash: str, receipt: dict[str, Any], operation: Optional[str]) -> TransactionOutcome:
    try:
        status = int(receipt["status"], 16)
        gas_used = int(receipt["gasUsed"], 16)
        block_number = int(receipt["blockNumber"], 16)
    except (KeyError, TypeError, ValueError):
        raise MalformedResponse(
            f"Receipt for {tx_hash} is missing status, gasUsed or blockNumber",
            operation=operation,
        ) from None
    return TransactionOutcome(
        tx_hash=tx_hash,
        success=status == 1,
        gas_used=gas_used,
        block_number=block_number,
        block_hash=receipt.get("blockHash"),
    )
