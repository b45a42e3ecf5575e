"""
Contract client factory.

``connect`` turns resolved settings into a ready-to-use handle: an RPC
client, a signing identity, and the attendance contract binding.  It is
called lazily by the action handlers, after payload validation, so an
invalid request never touches the network.
"""

from __future__ import annotations

from importlib import metadata
from typing import Any, Optional, Protocol

import httpx
from eth_account.signers.local import LocalAccount

from . import console
from .chain.abi import encode_call, decode_result, is_address, load_abi, to_checksum_address
from .chain.rpc import RpcClient, RpcError
from .chain.tx import build_contract_tx, sign_and_send
from .config import Settings, resolve_contract_address
from .errors import ConfigurationError, ConnectivityError
from .models import Submission
from .wallet import get_account


class ContractHandle(Protocol):
    """What the action handlers need from a contract binding."""

    def call(self, function_name: str, *args: Any) -> Any:
        ...

    def transact(self, function_name: str, *args: Any) -> Submission:
        ...


class ContractClient:
    """
    Attendance contract bound to an RPC client and a signing account.

    Read-only functions go through ``eth_call``; mutating functions are
    signed locally and submitted as raw legacy transactions carrying an
    explicit gas ceiling.
    """

    def __init__(
        self,
        rpc: RpcClient,
        account: LocalAccount,
        address: str,
        abi: Any,
        chain_id: int,
        gas_limit: int,
        wait_for_receipt: bool = False,
        receipt_timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> None:
        self.rpc = rpc
        self.account = account
        self.address = address
        self.abi = abi
        self.chain_id = chain_id
        self.gas_limit = gas_limit
        self.wait_for_receipt = wait_for_receipt
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval

    def call(self, function_name: str, *args: Any) -> Any:
        calldata = encode_call(self.abi, function_name, list(args))
        result = self.rpc.call(self.address, calldata, sender=self.account.address)
        if result == "0x":
            # Empty return data from a function that declares outputs
            raise RpcError("eth_call", f"{function_name} returned no data")
        return decode_result(self.abi, function_name, result)

    def transact(self, function_name: str, *args: Any) -> Submission:
        calldata = encode_call(self.abi, function_name, list(args))
        tx = build_contract_tx(
            self.rpc,
            self.account,
            self.address,
            calldata,
            gas_limit=self.gas_limit,
            chain_id=self.chain_id,
        )
        sent = sign_and_send(
            self.rpc,
            self.account,
            tx,
            wait=self.wait_for_receipt,
            timeout=self.receipt_timeout,
            poll_interval=self.poll_interval,
        )
        console.note(f"{function_name} -> tx submitted: {sent['tx_hash']}")
        return Submission(
            tx_hash=sent["tx_hash"],
            block_number=sent.get("block_number"),
            status=sent.get("status"),
        )

    def close(self) -> None:
        self.rpc.close()


def connect(settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> ContractClient:
    """
    Build the contract client for one invocation.

    Args:
        settings: Resolved settings
        transport: Optional httpx transport (tests inject a MockTransport)

    Raises:
        ConfigurationError: Missing endpoint, key, or contract address, or
            no contract deployed at the address
        ConnectivityError: Signing identity or RPC client construction failed
    """
    console.note(f"client libraries: {_library_versions()}")

    if not settings.rpc_url:
        raise ConfigurationError("RPC endpoint is not configured. Set ETH_RPC_URL.")
    console.note(f"RPC endpoint: {settings.rpc_url}")
    console.note(f"signing key set: {bool(settings.private_key)}")

    address, source = resolve_contract_address(settings)
    console.note(f"contract address {address} from {source}")
    if not is_address(address):
        raise ConfigurationError(f"Contract address is not a valid 20-byte hex address: {address!r}")
    address = to_checksum_address(address)

    account = get_account(settings.private_key)
    console.note(f"wallet address: {account.address}")

    try:
        abi = load_abi(settings.abi_path)
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Failed to load contract ABI: {exc}") from exc
    console.note(f"ABI: {settings.abi_path or 'bundled attendance ABI'}")

    rpc = RpcClient(settings.rpc_url, timeout=settings.timeout, transport=transport)
    try:
        chain_id = settings.chain_id or rpc.chain_id()
        code = rpc.get_code(address)
    except (httpx.HTTPError, RpcError, ValueError, TypeError) as exc:
        rpc.close()
        raise ConnectivityError(f"Failed to reach RPC endpoint {settings.rpc_url}: {exc}") from exc

    if code in ("0x", "0x0", ""):
        rpc.close()
        raise ConfigurationError(f"No contract deployed at {address} on chain {chain_id}")

    console.note(f"provider ready, chain id {chain_id}, gas limit {settings.gas_limit}")
    mode = "wait for confirmation" if settings.wait_for_receipt else "submit and return"
    console.note(f"mutating calls: {mode}")

    return ContractClient(
        rpc,
        account,
        address,
        abi,
        chain_id=chain_id,
        gas_limit=settings.gas_limit,
        wait_for_receipt=settings.wait_for_receipt,
        receipt_timeout=settings.receipt_timeout,
        poll_interval=settings.poll_interval,
    )


def _library_versions() -> str:
    parts = []
    for dist in ("eth-account", "eth-abi", "httpx"):
        try:
            parts.append(f"{dist} {metadata.version(dist)}")
        except metadata.PackageNotFoundError:
            parts.append(f"{dist} unknown")
    return ", ".join(parts)


class LazyConnector:
    """
    Zero-argument connector handed to the action handlers.

    The client is built on first use and reused afterwards, so a process
    constructs at most one client no matter how many calls a handler makes.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.settings = settings
        self.transport = transport
        self._client: Optional[ContractClient] = None

    def __call__(self) -> ContractClient:
        if self._client is None:
            self._client = connect(self.settings, transport=self.transport)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
