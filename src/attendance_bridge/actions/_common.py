from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator

from .. import console
from ..client import ContractHandle
from ..errors import BridgeError, RemoteCallError
from ..models import Submission
from ..payloads import check_payload, require_fields

Connector = Callable[[], ContractHandle]


def validate(action: str, payload: dict[str, Any], *required: str) -> None:
    """Required-field and schema checks; runs before any remote call."""
    require_fields(payload, *required)
    check_payload(action, payload)


@contextmanager
def remote_call(operation: str) -> Iterator[None]:
    """
    Translate any failure inside the block into RemoteCallError.

    Errors already in the bridge taxonomy pass through untouched.
    """
    try:
        yield
    except BridgeError:
        raise
    except Exception as exc:
        console.fail(f"{operation} error: {type(exc).__name__}: {exc}")
        raise RemoteCallError(f"{operation} failed: {exc}") from exc


def submission_message(submission: Submission) -> str:
    if submission.confirmed:
        return f"Transaction confirmed in block {submission.block_number}"
    return "Transaction submitted (not awaited); confirm status asynchronously."
