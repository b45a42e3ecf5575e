"""
ABI handling for the attendance contract.

The contract interface ships with the package.  A Hardhat or Foundry
artifact can replace it when the deployed contract was rebuilt.
Encoding and decoding use eth-abi; selectors use Keccak-256 from eth-hash.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_hash.auto import keccak

_RECORD_COMPONENTS = [
    {"name": "sessionCode", "type": "string"},
    {"name": "classId", "type": "string"},
    {"name": "studentId", "type": "string"},
    {"name": "studentAddress", "type": "address"},
    {"name": "timestamp", "type": "uint256"},
    {"name": "verified", "type": "bool"},
]


def _fn(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: Optional[list[dict[str, Any]]] = None,
    mutability: str = "nonpayable",
) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": outputs or [],
        "stateMutability": mutability,
    }


ATTENDANCE_ABI: list[dict[str, Any]] = [
    _fn(
        "createSession",
        [("sessionCode", "string"), ("classId", "string"), ("durationMinutes", "uint256")],
    ),
    _fn(
        "markAttendance",
        [("sessionCode", "string"), ("studentId", "string"), ("classId", "string")],
    ),
    _fn(
        "hasAttended",
        [("sessionCode", "string"), ("studentId", "string")],
        [{"name": "", "type": "bool"}],
        "view",
    ),
    _fn(
        "getAttendanceRecord",
        [("sessionCode", "string"), ("studentId", "string")],
        [{"name": "", "type": "tuple", "components": _RECORD_COMPONENTS}],
        "view",
    ),
    _fn(
        "isSessionValid",
        [("sessionCode", "string")],
        [{"name": "", "type": "bool"}],
        "view",
    ),
    _fn("getTotalRecords", [], [{"name": "", "type": "uint256"}], "view"),
    _fn(
        "getRecordByIndex",
        [("index", "uint256")],
        [{"name": "", "type": "tuple", "components": _RECORD_COMPONENTS}],
        "view",
    ),
    _fn("authorizeTeacher", [("teacher", "address")]),
    _fn("registerStudent", [("studentId", "string"), ("studentAddress", "address")]),
]


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256
    return keccak(data)


@lru_cache(maxsize=8)
def load_abi(artifact_path: Optional[Path] = None) -> tuple[dict[str, Any], ...]:
    """
    Load the contract ABI.

    Args:
        artifact_path: Compiled artifact (``{"abi": [...]}``) or a bare ABI
            list.  When None, the bundled attendance ABI is used.

    Returns:
        ABI entries as a tuple (hashable for caching)

    Raises:
        FileNotFoundError: If the artifact does not exist
        ValueError: If the artifact carries no ABI
    """
    if artifact_path is None:
        return tuple(ATTENDANCE_ABI)

    if not artifact_path.exists():
        raise FileNotFoundError(f"ABI artifact not found: {artifact_path}")

    with artifact_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    abi = artifact.get("abi") if isinstance(artifact, dict) else artifact
    if not isinstance(abi, list):
        raise ValueError(f"No ABI in artifact {artifact_path}")
    return tuple(abi)


def find_function(abi: Any, function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def canonical_type(param: dict[str, Any]) -> str:
    """Render an ABI parameter as an eth-abi type string (tuples expanded)."""
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    inner = ",".join(canonical_type(c) for c in param.get("components", []))
    return f"({inner}){abi_type[len('tuple'):]}"


def function_signature(entry: dict[str, Any]) -> str:
    types = ",".join(canonical_type(p) for p in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def function_selector(entry: dict[str, Any]) -> bytes:
    return keccak256(function_signature(entry).encode("utf-8"))[:4]


def encode_call(abi: Any, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex calldata
    """
    entry = find_function(abi, function_name)
    input_types = [canonical_type(p) for p in entry.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + function_selector(entry).hex() + encoded_args.hex()


def decode_result(abi: Any, function_name: str, data: str) -> Any:
    """
    ABI-decode a function result.

    Returns:
        Single value, a tuple for multiple outputs, or None
    """
    entry = find_function(abi, function_name)
    output_types = [canonical_type(p) for p in entry.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def is_address(value: str) -> bool:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) != 42:
        return False
    try:
        int(value[2:], 16)
    except ValueError:
        return False
    return True


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result
