"""Tests for the JSON-RPC client using httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from transmute.errors import Cancelled, MalformedResponse, NodeUnavailable, RpcError
from transmute.pneuma.cancel import CancelToken
from transmute.pneuma.rpc import RpcClient, call_object
from transmute.pneuma.types import Address

from conftest import DEV_ADDRESS, WETH


def _client(handler: Callable[[dict], Any], status: int = 200) -> tuple[RpcClient, list[dict]]:
    seen: list[dict] = []

    def transport(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        body = handler(payload)
        return httpx.Response(status, json=body)

    return RpcClient("http://node.test", transport=httpx.MockTransport(transport)), seen


def _result(value: Any) -> Callable[[dict], dict]:
    return lambda payload: {"jsonrpc": "2.0", "id": payload["id"], "result": value}


def test_quantities_are_parsed() -> None:
    rpc, seen = _client(_result("0x539"))
    assert rpc.chain_id() == 1337
    assert seen[0]["method"] == "eth_chainId"
    assert seen[0]["jsonrpc"] == "2.0"


def test_transaction_count_uses_pending_block() -> None:
    rpc, seen = _client(_result("0x5"))
    assert rpc.get_transaction_count(Address.from_hex(DEV_ADDRESS)) == 5
    assert seen[0]["params"] == [DEV_ADDRESS, "pending"]


def test_request_ids_increase() -> None:
    rpc, seen = _client(_result("0x1"))
    rpc.gas_price()
    rpc.gas_price()
    assert seen[1]["id"] > seen[0]["id"]


def test_call_returns_bytes() -> None:
    rpc, seen = _client(_result("0x" + "00" * 31 + "2a"))
    data = rpc.call(call_object(Address.from_hex(WETH), b"\x70\xa0\x82\x31"))
    assert int.from_bytes(data, "big") == 42
    assert seen[0]["params"] == [{"to": WETH, "data": "0x70a08231"}, "latest"]


def test_call_object_fields() -> None:
    call = call_object(Address.from_hex(WETH), b"", sender=Address.from_hex(DEV_ADDRESS), value=10**18)
    assert call == {"to": WETH, "data": "0x", "from": DEV_ADDRESS, "value": hex(10**18)}


def test_receipt_pending_is_none() -> None:
    rpc, _ = _client(_result(None))
    assert rpc.get_transaction_receipt("0x" + "11" * 32) is None


def test_send_raw_transaction() -> None:
    tx_hash = "0x" + "ab" * 32
    rpc, seen = _client(_result(tx_hash))
    assert rpc.send_raw_transaction("0xf86b") == tx_hash
    assert seen[0]["params"] == ["0xf86b"]


def test_json_rpc_error() -> None:
    def handler(payload: dict) -> dict:
        return {
            "jsonrpc": "2.0",
            "id": payload["id"],
            "error": {"code": 3, "message": "execution reverted", "data": "0x08c379a0"},
        }

    rpc, _ = _client(handler)
    with pytest.raises(RpcError) as exc_info:
        rpc.estimate_gas({"to": WETH, "data": "0x"})
    err = exc_info.value
    assert not isinstance(err, NodeUnavailable)
    assert err.method == "eth_estimateGas"
    assert err.code == 3
    assert err.node_message == "execution reverted"
    assert err.data == "0x08c379a0"


def test_http_error_is_node_unavailable() -> None:
    rpc, _ = _client(_result("0x1"), status=502)
    with pytest.raises(NodeUnavailable):
        rpc.gas_price()


def test_transport_failure_is_node_unavailable() -> None:
    def transport(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    rpc = RpcClient("http://node.test", transport=httpx.MockTransport(transport))
    with pytest.raises(NodeUnavailable):
        rpc.chain_id()


def test_non_hex_quantity_is_malformed() -> None:
    rpc, _ = _client(_result(12))
    with pytest.raises(MalformedResponse):
        rpc.gas_price()


def test_cancelled_token_skips_request() -> None:
    rpc, seen = _client(_result("0x1"))
    token = CancelToken()
    token.cancel()
    with pytest.raises(Cancelled):
        rpc.gas_price(cancel=token)
    assert seen == []


def test_context_manager_closes() -> None:
    with _client(_result("0x1"))[0] as rpc:
        assert rpc.gas_price() == 1


def test_timeout_after_token_expiry_is_cancelled() -> None:
    token = CancelToken(timeout=30)

    def transport(request: httpx.Request) -> httpx.Response:
        token.cancel()
        raise httpx.ReadTimeout("read timed out", request=request)

    rpc = RpcClient("http://node.test", transport=httpx.MockTransport(transport))
    with pytest.raises(Cancelled):
        rpc.get_transaction_receipt("0x" + "11" * 32, cancel=token)


def test_timeout_without_cancellation_is_node_unavailable() -> None:
    def transport(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    rpc = RpcClient("http://node.test", transport=httpx.MockTransport(transport))
    with pytest.raises(NodeUnavailable):
        rpc.gas_price(cancel=CancelToken(timeout=30))
