"""
Error taxonomy for the attendance bridge.

Every failure that reaches the dispatcher is rendered as the same JSON
envelope; the class only tells the diagnostic stream what went wrong.
"""

from __future__ import annotations


class BridgeError(RuntimeError):
    exit_code: int = 1


class ValidationError(BridgeError):
    """Payload is missing required fields or carries malformed values."""


class ConfigurationError(BridgeError):
    """Endpoint, signing key or contract address cannot be resolved."""


class ConnectivityError(BridgeError):
    """RPC client or signing identity could not be constructed."""


class RemoteCallError(BridgeError):
    """A contract call failed, reverted, or was rejected by a pre-flight check."""


class UnknownActionError(BridgeError):
    pass


class UsageError(BridgeError):
    pass
