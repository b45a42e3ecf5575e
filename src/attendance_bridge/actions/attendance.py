"""
Attendance actions - mark attendance and read attendance records.

markAttendance runs two read-only pre-flight checks (session still valid,
student not yet marked) before it spends gas on a call the contract would
reject.
"""

from __future__ import annotations

import time
from typing import Any

from .. import console
from ..errors import RemoteCallError
from ..models import AttendanceRecord
from ..payloads import as_uint256
from ._common import Connector, remote_call, submission_message, validate


def mark_attendance(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    """
    Record a student's attendance for a session.

    Payload: ``sessionCode``, ``studentId``, ``classId``.
    """
    validate("markAttendance", payload, "sessionCode", "studentId", "classId")
    session_code = payload["sessionCode"]
    student_id = payload["studentId"]
    class_id = payload["classId"]

    contract = connect()
    with remote_call("markAttendance"):
        if not contract.call("isSessionValid", session_code):
            raise RemoteCallError(
                f"markAttendance failed: session {session_code!r} is not valid or has expired"
            )
        if contract.call("hasAttended", session_code, student_id):
            raise RemoteCallError(
                f"markAttendance failed: student {student_id!r} already marked "
                f"for session {session_code!r}"
            )

        console.note(
            f"markAttendance -> sessionCode={session_code!r} studentId={student_id!r} "
            f"classId={class_id!r}"
        )
        submission = contract.transact("markAttendance", session_code, student_id, class_id)

    return {
        "success": True,
        **submission.to_dict(),
        "sessionCode": session_code,
        "studentId": student_id,
        "classId": class_id,
        "timestamp": int(time.time() * 1000),
        "message": submission_message(submission),
    }


def has_attended(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    validate("hasAttended", payload, "sessionCode", "studentId")
    session_code = payload["sessionCode"]
    student_id = payload["studentId"]

    contract = connect()
    with remote_call("hasAttended"):
        attended = contract.call("hasAttended", session_code, student_id)

    return {
        "success": True,
        "sessionCode": session_code,
        "studentId": student_id,
        "hasAttended": bool(attended),
    }


def get_attendance_record(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    validate("getAttendanceRecord", payload, "sessionCode", "studentId")

    contract = connect()
    with remote_call("getAttendanceRecord"):
        raw = contract.call("getAttendanceRecord", payload["sessionCode"], payload["studentId"])
        record = AttendanceRecord.from_abi(raw)

    return {"success": True, "record": record.to_dict()}


def get_total_records(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    validate("getTotalRecords", payload)

    contract = connect()
    with remote_call("getTotalRecords"):
        total = contract.call("getTotalRecords")

    return {"success": True, "totalRecords": int(total)}


def get_record_by_index(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    """Payload: ``index`` (0 is a valid index; digit strings are accepted)."""
    validate("getRecordByIndex", payload, "index")
    index = as_uint256(payload, "index")

    contract = connect()
    with remote_call("getRecordByIndex"):
        raw = contract.call("getRecordByIndex", index)
        record = AttendanceRecord.from_abi(raw)

    return {"success": True, "index": index, "record": record.to_dict()}
