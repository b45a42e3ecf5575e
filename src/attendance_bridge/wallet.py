"""
Signing identity for mutating contract calls.

Keys are supplied through PRIVATE_KEY (hex).  There is no
fallback key: a missing key is a configuration error.

Dependencies: eth-account (no full web3.py needed)
"""

from __future__ import annotations

from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .errors import ConfigurationError, ConnectivityError


def get_account(private_key: Optional[str]) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key

    Returns:
        LocalAccount instance for signing transactions

    Raises:
        ConfigurationError: If no key is supplied
        ConnectivityError: If the key cannot be turned into an account
    """
    if not private_key:
        raise ConfigurationError("PRIVATE_KEY is not set; refusing to run without a signing key.")
    try:
        return Account.from_key(private_key)
    except Exception as exc:
        # The key itself must never reach the diagnostic stream
        raise ConnectivityError(f"Signing identity construction failed: {type(exc).__name__}") from None


def get_address(private_key: Optional[str]) -> str:
    """Get the checksummed address for a private key."""
    return get_account(private_key).address
