__all__ = [
    # Errors
    "BridgeError",
    "ValidationError",
    "ConfigurationError",
    "ConnectivityError",
    "RemoteCallError",
    "UnknownActionError",
    "UsageError",
    # Configuration
    "Settings",
    "sanitize_address",
    "resolve_contract_address",
    # Client
    "ContractClient",
    "ContractHandle",
    "LazyConnector",
    "connect",
    # Models
    "AttendanceRecord",
    "Submission",
    # Dispatch
    "ACTIONS",
    "dispatch",
    "run_action",
]

from .errors import (
    BridgeError,
    ConfigurationError,
    ConnectivityError,
    RemoteCallError,
    UnknownActionError,
    UsageError,
    ValidationError,
)
from .config import Settings, resolve_contract_address, sanitize_address
from .client import ContractClient, ContractHandle, LazyConnector, connect
from .models import AttendanceRecord, Submission
from .actions import ACTIONS
from .dispatch import dispatch, run_action
