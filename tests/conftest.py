"""Shared fixtures: a fake contract handle and a mocked JSON-RPC node."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest
from eth_account import Account

from attendance_bridge.models import Submission

STUDENT_ADDRESS = "0x" + "11" * 20
TX_HASH = "0x" + "ab" * 32
RECORD = ("S1", "C1", "STU1", STUDENT_ADDRESS, 1_700_000_000, True)


class FakeContract:
    """In-memory stand-in for ContractClient that records every call."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = {
            "isSessionValid": True,
            "hasAttended": False,
            "getTotalRecords": 0,
            "getAttendanceRecord": RECORD,
            "getRecordByIndex": RECORD,
        }
        self.responses.update(responses or {})
        self.calls: list[tuple[str, tuple]] = []
        self.transactions: list[tuple[str, tuple]] = []
        self.submission = Submission(tx_hash=TX_HASH)
        self.transact_error: Exception | None = None

    def call(self, function_name: str, *args: Any) -> Any:
        self.calls.append((function_name, args))
        value = self.responses[function_name]
        if isinstance(value, Exception):
            raise value
        return value

    def transact(self, function_name: str, *args: Any) -> Submission:
        self.transactions.append((function_name, args))
        if self.transact_error is not None:
            raise self.transact_error
        return self.submission


class CountingConnector:
    def __init__(self, contract: FakeContract) -> None:
        self.contract = contract
        self.count = 0
        self.closed = False

    def __call__(self) -> FakeContract:
        self.count += 1
        return self.contract

    def close(self) -> None:
        self.closed = True


class MockNode:
    """
    JSON-RPC node behind an httpx.MockTransport.

    ``results`` maps method names to a value or to a callable taking the
    params list.  Every request is recorded in ``requests``.
    """

    def __init__(self, results: dict[str, Any] | None = None) -> None:
        self.results: dict[str, Any] = {
            "eth_chainId": "0x7a69",
            "eth_getCode": "0x6080604052",
            "eth_getTransactionCount": "0x5",
            "eth_gasPrice": "0x3b9aca00",
            "eth_sendRawTransaction": TX_HASH,
            "eth_getTransactionReceipt": {"status": "0x1", "blockNumber": "0x10"},
        }
        self.results.update(results or {})
        self.requests: list[dict[str, Any]] = []

    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    def params_for(self, method: str) -> list:
        for request in self.requests:
            if request["method"] == method:
                return request["params"]
        raise AssertionError(f"{method} was never called")

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        method = body["method"]
        if method not in self.results:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": f"{method} not mocked"}},
            )
        result = self.results[method]
        if isinstance(result, dict) and "__error__" in result:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": result["__error__"]})
        if callable(result):
            result = result(body["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture()
def contract() -> FakeContract:
    return FakeContract()


@pytest.fixture()
def connector(contract: FakeContract) -> CountingConnector:
    return CountingConnector(contract)


@pytest.fixture()
def node() -> MockNode:
    return MockNode()


@pytest.fixture()
def account():
    return Account.create()


@pytest.fixture()
def private_key(account) -> str:
    return "0x" + bytes(account.key).hex()


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Remove every bridge-related variable from the environment."""
    names = [
        "ETH_RPC_URL", "RPC_URL", "PRIVATE_KEY", "CONTRACT_ADDRESS", "DEPLOYMENT_FILE",
        "CONTRACT_ABI_PATH", "GAS_LIMIT", "CHAIN_ID", "RPC_TIMEOUT", "WAIT_FOR_RECEIPT",
        "RECEIPT_TIMEOUT", "RECEIPT_POLL_INTERVAL", "INCLUDE_STACK",
    ]
    for name in names:
        # setenv first so teardown also removes values loaded by the test
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)

    def _set(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return _set
