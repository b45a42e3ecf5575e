"""
Configuration for the attendance bridge.

Settings are read from the process environment (optionally seeded from a
``.env`` file) and may be overridden by CLI options.  Nothing is validated
here beyond type conversion: a missing endpoint or signing key is only an
error once the contract client is actually built.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from . import console
from .errors import ConfigurationError

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_GAS_LIMIT = 7_000_000
DEFAULT_TIMEOUT = 30.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_DEPLOYMENT_FILE = "deployment.json"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    rpc_url: Optional[str] = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    # Sanitized CONTRACT_ADDRESS from the environment
    contract_address: Optional[str] = None
    # Static fallback (``--contract-address``)
    configured_address: Optional[str] = None
    deployment_file: Path = Path(DEFAULT_DEPLOYMENT_FILE)
    abi_path: Optional[Path] = None
    gas_limit: int = DEFAULT_GAS_LIMIT
    chain_id: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    wait_for_receipt: bool = False
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    include_stack: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``)

        Raises:
            ConfigurationError: If a numeric or boolean variable is malformed
        """
        env = os.environ if environ is None else environ

        abi_path = env.get("CONTRACT_ABI_PATH")

        return cls(
            rpc_url=env.get("ETH_RPC_URL") or env.get("RPC_URL") or DEFAULT_RPC_URL,
            private_key=_normalize_private_key(env.get("PRIVATE_KEY")),
            contract_address=sanitize_address(env.get("CONTRACT_ADDRESS")) or None,
            deployment_file=Path(env.get("DEPLOYMENT_FILE") or DEFAULT_DEPLOYMENT_FILE),
            abi_path=Path(abi_path) if abi_path else None,
            gas_limit=_parse_int(env, "GAS_LIMIT", DEFAULT_GAS_LIMIT),
            chain_id=_parse_int(env, "CHAIN_ID", None),
            timeout=_parse_float(env, "RPC_TIMEOUT", DEFAULT_TIMEOUT),
            wait_for_receipt=_parse_bool(env, "WAIT_FOR_RECEIPT", False),
            receipt_timeout=_parse_float(env, "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
            poll_interval=_parse_float(env, "RECEIPT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            include_stack=_parse_bool(env, "INCLUDE_STACK", True),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_environment(env_path: Optional[Path] = None) -> None:
    """
    Seed ``os.environ`` from a .env file without overriding set values.

    Without an explicit path, the nearest .env from the working directory
    upward is used.

    Raises:
        ConfigurationError: If the file exists but cannot be read or decoded
    """
    path = str(env_path) if env_path is not None else find_dotenv(usecwd=True)
    if not path or not Path(path).exists():
        return
    try:
        load_dotenv(path, override=False)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read env file {path}: {exc}") from exc


def sanitize_address(raw: Optional[str]) -> str:
    """
    Clean up an address copied from a badly formatted env file.

    ``CONTRACT_ADDRESS=0xabc`` and ``"0xabc"`` both become ``0xabc``.
    """
    if not raw:
        return ""
    if "=" in raw and "0x" in raw:
        raw = raw[raw.index("0x"):]
    return raw.strip().strip('"').strip("'").strip()


def read_deployment_address(path: Path) -> Optional[str]:
    """
    Read the contract address from a deployment descriptor.

    Accepts ``contractAddress`` or ``address``.  A missing or unreadable
    file yields None so that resolution can report the real problem.
    """
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            deployment = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        console.note(f"failed to parse {path}: {exc}")
        return None

    if not isinstance(deployment, dict):
        console.note(f"ignoring {path}: expected a JSON object")
        return None

    address = deployment.get("contractAddress") or deployment.get("address")
    return sanitize_address(address) if isinstance(address, str) else None


def resolve_contract_address(settings: Settings) -> tuple[str, str]:
    """
    Resolve the contract address.

    Precedence: sanitized environment value, static configuration,
    deployment descriptor.

    Returns:
        Tuple of (address, source description)

    Raises:
        ConfigurationError: If no source provides an address
    """
    if settings.contract_address:
        return settings.contract_address, "environment (CONTRACT_ADDRESS)"

    configured = sanitize_address(settings.configured_address)
    if configured:
        return configured, "static configuration"

    from_file = read_deployment_address(settings.deployment_file)
    if from_file:
        return from_file, f"deployment descriptor ({settings.deployment_file})"

    raise ConfigurationError(
        "Contract address not found. Set CONTRACT_ADDRESS or provide "
        f"{settings.deployment_file}."
    )


def _normalize_private_key(raw: Optional[str]) -> Optional[str]:
    key = sanitize_address(raw) if raw else ""
    if not key:
        return None
    if not key.startswith("0x"):
        key = "0x" + key
    return key


def _parse_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        text = value.strip()
        return int(text, 16) if text.lower().startswith("0x") else int(text)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        result = float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None
    if result <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return result


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")
