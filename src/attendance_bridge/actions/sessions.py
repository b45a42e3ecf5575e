"""
Session actions - open attendance sessions and check their validity.
"""

from __future__ import annotations

from typing import Any

from .. import console
from ..payloads import as_uint256
from ._common import Connector, remote_call, submission_message, validate

DEFAULT_DURATION_MINUTES = 30


def create_session(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    """
    Open an attendance session on-chain.

    Payload: ``sessionCode``, ``classId``, optional ``durationMinutes``
    (default 30).
    """
    validate("createSession", payload, "sessionCode", "classId")
    session_code = payload["sessionCode"]
    class_id = payload["classId"]
    duration = DEFAULT_DURATION_MINUTES
    if payload.get("durationMinutes") is not None:
        duration = as_uint256(payload, "durationMinutes")

    contract = connect()
    with remote_call("createSession"):
        console.note(
            f"createSession -> sessionCode={session_code!r} classId={class_id!r} "
            f"durationMinutes={duration}"
        )
        submission = contract.transact("createSession", session_code, class_id, duration)

    return {
        "success": True,
        **submission.to_dict(),
        "sessionCode": session_code,
        "classId": class_id,
        "durationMinutes": duration,
        "message": submission_message(submission),
    }


def is_session_valid(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    validate("isSessionValid", payload, "sessionCode")
    session_code = payload["sessionCode"]

    contract = connect()
    with remote_call("isSessionValid"):
        valid = contract.call("isSessionValid", session_code)

    return {"success": True, "sessionCode": session_code, "isValid": bool(valid)}
