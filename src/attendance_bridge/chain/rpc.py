"""
JSON-RPC client for an Ethereum-compatible node.

Lightweight alternative to web3.py: httpx for HTTP, eth-abi for encoding.
Every request is bounded by an explicit timeout so a stalled node cannot
hang the calling process.
"""

from __future__ import annotations

import itertools
import time
from typing import Any, Optional

import httpx


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, error: Any) -> None:
        if isinstance(error, dict):
            message = error.get("message") or str(error)
            self.code = error.get("code")
            self.data = error.get("data")
        else:
            message = str(error)
            self.code = None
            self.data = None
        super().__init__(f"RPC error from {method}: {message}")
        self.method = method


class RpcClient:
    """
    Minimal JSON-RPC 2.0 client.

    Args:
        url: Node endpoint
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests inject a MockTransport)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node returns an error object
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }

        response = self._http.post(self.url, json=payload)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            raise RpcError(method, data["error"])

        return data.get("result")

    # ---- eth_* helpers ----

    def quantity(self, method: str, params: Optional[list] = None) -> int:
        """
        Make a call whose result must be a hex quantity.

        Raises:
            RpcError: If the result is missing or not a hex string
        """
        result = self.request(method, params)
        if not isinstance(result, str) or not result.startswith("0x"):
            raise RpcError(method, f"expected a hex quantity, got {result!r}")
        try:
            return int(result, 16)
        except ValueError:
            raise RpcError(method, f"expected a hex quantity, got {result!r}") from None

    def chain_id(self) -> int:
        return self.quantity("eth_chainId")

    def get_code(self, address: str) -> str:
        return self.request("eth_getCode", [address, "latest"]) or "0x"

    def call(self, to: str, data: str, sender: Optional[str] = None) -> str:
        tx: dict[str, Any] = {"to": to, "data": data}
        if sender:
            tx["from"] = sender
        return self.request("eth_call", [tx, "latest"]) or "0x"

    def get_nonce(self, address: str) -> int:
        # Pending so back-to-back submissions from one key don't collide
        return self.quantity("eth_getTransactionCount", [address, "pending"])

    def get_gas_price(self) -> int:
        return self.quantity("eth_gasPrice")

    def send_raw_transaction(self, raw_tx: str) -> str:
        return self.request("eth_sendRawTransaction", [raw_tx])

    def get_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Poll until the transaction receipt is available.

        Raises:
            TimeoutError: If no receipt appears within ``timeout`` seconds
        """
        deadline = time.monotonic() + timeout
        while True:
            receipt = self.get_receipt(tx_hash)
            if receipt is not None:
                return receipt
            if time.monotonic() >= deadline:
                break
            time.sleep(max(0.0, min(poll_interval, deadline - time.monotonic())))

        raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout:g}s")
