"""
Transaction Builder - Build, sign, and send contract transactions.

Uses eth-account for local signing and the JSON-RPC client for sending.
Gas is paid by the signing account.
"""

from __future__ import annotations

from typing import Any

from eth_account.signers.local import LocalAccount

from .abi import to_checksum_address
from .rpc import RpcClient


class TransactionFailedError(RuntimeError):
    """A mined transaction reported status 0 (reverted)."""

    def __init__(self, tx_hash: str, receipt: dict) -> None:
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt


def build_contract_tx(
    rpc: RpcClient,
    account: LocalAccount,
    contract_address: str,
    calldata: str,
    gas_limit: int,
    chain_id: int,
    value: int = 0,
) -> dict:
    """
    Build an unsigned legacy transaction for a contract call.

    Args:
        rpc: Node client used for nonce and gas price lookup
        account: Sender
        contract_address: 0x-prefixed contract address
        calldata: 0x-prefixed ABI-encoded call
        gas_limit: Explicit gas ceiling
        chain_id: Chain ID for replay protection
        value: ETH value in wei

    Returns:
        Unsigned transaction dict
    """
    return {
        "to": to_checksum_address(contract_address),
        "data": calldata,
        "value": value,
        "nonce": rpc.get_nonce(account.address),
        "gas": gas_limit,
        "gasPrice": rpc.get_gas_price(),
        "chainId": chain_id,
    }


def sign_and_send(
    rpc: RpcClient,
    account: LocalAccount,
    tx: dict,
    wait: bool = False,
    timeout: float = 120.0,
    poll_interval: float = 2.0,
) -> dict:
    """
    Sign a transaction and submit it.

    Args:
        wait: Whether to wait for the receipt
        timeout: Receipt wait timeout in seconds
        poll_interval: Receipt polling interval in seconds

    Returns:
        Dict with tx_hash and, when waited for, receipt, status and
        block_number

    Raises:
        TransactionFailedError: If the awaited receipt reports a revert
        TimeoutError: If the receipt does not arrive in time
    """
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = rpc.send_raw_transaction(raw_tx)
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = rpc.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
        status = int(receipt.get("status") or "0x0", 16)
        if status != 1:
            raise TransactionFailedError(tx_hash, receipt)
        result["receipt"] = receipt
        result["status"] = status
        block_number = receipt.get("blockNumber")
        result["block_number"] = int(block_number, 16) if block_number else None

    return result
