"""
JSON-RPC client for an EVM node.

Lightweight alternative to web3.py: uses httpx for HTTP.  Exposes just
what the swap workflow needs: nonce, gas price, gas estimation, eth_call,
raw transaction submission and receipt lookup.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import httpx

from ..errors import Cancelled, MalformedResponse, NodeUnavailable, RpcError
from .cancel import CancelToken
from .types import Address

logger = logging.getLogger(__name__)

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_TIMEOUT = 30.0


class RpcClient:
    """
    Synchronous JSON-RPC client.

    Args:
        url: Node endpoint
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._http = httpx.Client(timeout=timeout, transport=transport)
        self._ids = itertools.count(1)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ============ Transport ============

    def request(self, method: str, params: list, cancel: Optional[CancelToken] = None) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: The node answered with an error object
            NodeUnavailable: Transport failure or unparseable reply
            Cancelled: ``cancel`` fired before or during the request
        """
        timeout = self.timeout
        if cancel is not None:
            cancel.check(method)
            remaining = cancel.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            response = self._http.post(self.url, json=payload, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            if cancel is not None and cancel.cancelled:
                raise Cancelled("Request cancelled", operation=method) from exc
            raise NodeUnavailable(f"RPC {method} timed out", method=method) from exc
        except httpx.HTTPError as exc:
            raise NodeUnavailable(f"RPC {method} failed: {exc}", method=method) from exc
        except ValueError as exc:
            raise NodeUnavailable(f"RPC {method} returned non-JSON body", method=method) from exc

        if not isinstance(data, dict):
            raise NodeUnavailable(f"RPC {method} returned unexpected payload", method=method)

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict):
                message = str(error.get("message", "unknown error"))
                code = error.get("code")
                extra = error.get("data")
            else:
                message, code, extra = str(error), None, None
            logger.debug("RPC %s returned error %s: %s", method, code, message)
            raise RpcError(
                f"RPC error from {method}",
                method=method,
                code=code,
                data=extra,
                node_message=message,
            )

        return data.get("result")

    # ============ Chain state ============

    def chain_id(self, cancel: Optional[CancelToken] = None) -> int:
        return _quantity("eth_chainId", self.request("eth_chainId", [], cancel))

    def get_transaction_count(
        self,
        address: Address,
        block: str = "pending",
        cancel: Optional[CancelToken] = None,
    ) -> int:
        result = self.request("eth_getTransactionCount", [address.checksum, block], cancel)
        return _quantity("eth_getTransactionCount", result)

    def gas_price(self, cancel: Optional[CancelToken] = None) -> int:
        return _quantity("eth_gasPrice", self.request("eth_gasPrice", [], cancel))

    def get_balance(
        self,
        address: Address,
        block: str = "latest",
        cancel: Optional[CancelToken] = None,
    ) -> int:
        result = self.request("eth_getBalance", [address.checksum, block], cancel)
        return _quantity("eth_getBalance", result)

    # ============ Calls ============

    def estimate_gas(self, call: dict[str, Any], cancel: Optional[CancelToken] = None) -> int:
        return _quantity("eth_estimateGas", self.request("eth_estimateGas", [call], cancel))

    def call(
        self,
        call: dict[str, Any],
        block: str = "latest",
        cancel: Optional[CancelToken] = None,
    ) -> bytes:
        result = self.request("eth_call", [call, block], cancel)
        return _data("eth_call", result)

    # ============ Transactions ============

    def send_raw_transaction(self, raw_tx: str, cancel: Optional[CancelToken] = None) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        result = self.request("eth_sendRawTransaction", [raw_tx], cancel)
        if not isinstance(result, str):
            raise MalformedResponse(
                "eth_sendRawTransaction did not return a hash", operation="eth_sendRawTransaction"
            )
        return result

    def get_transaction_receipt(
        self, tx_hash: str, cancel: Optional[CancelToken] = None
    ) -> Optional[dict[str, Any]]:
        """Receipt dict, or None while the transaction is still pending."""
        receipt = self.request("eth_getTransactionReceipt", [tx_hash], cancel)
        if receipt is not None and not isinstance(receipt, dict):
            raise MalformedResponse(
                "eth_getTransactionReceipt returned a non-object", operation="eth_getTransactionReceipt"
            )
        return receipt


def call_object(
    to: Address,
    data: bytes,
    sender: Optional[Address] = None,
    value: int = 0,
) -> dict[str, Any]:
    """Build the call object accepted by eth_call / eth_estimateGas."""
    call: dict[str, Any] = {"to": to.checksum, "data": "0x" + data.hex()}
    if sender is not None:
        call["from"] = sender.checksum
    if value:
        call["value"] = hex(value)
    return call


def _quantity(method: str, value: Any) -> int:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise MalformedResponse(f"{method} returned {value!r}, expected a hex quantity", operation=method)
    try:
        return int(value, 16)
    except ValueError:
        raise MalformedResponse(f"{method} returned {value!r}, expected a hex quantity", operation=method) from None


def _data(method: str, value: Any) -> bytes:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise MalformedResponse(f"{method} returned {value!r}, expected hex data", operation=method)
    try:
        return bytes.fromhex(value[2:])
    except ValueError:
        raise MalformedResponse(f"{method} returned {value!r}, expected hex data", operation=method) from None
