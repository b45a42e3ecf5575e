"""
Actions - the operations the bridge can dispatch.

Each handler takes the decoded payload and a zero-argument connector that
builds the contract client, and returns the JSON-ready result:
- sessions:   createSession, isSessionValid
- attendance: markAttendance, hasAttended, getAttendanceRecord,
              getTotalRecords, getRecordByIndex
- roles:      authorizeTeacher, registerStudent
"""

from __future__ import annotations

from typing import Any, Callable

from ._common import Connector
from .attendance import (
    get_attendance_record,
    get_record_by_index,
    get_total_records,
    has_attended,
    mark_attendance,
)
from .roles import authorize_teacher, register_student
from .sessions import create_session, is_session_valid

Handler = Callable[[dict[str, Any], Connector], dict[str, Any]]

ACTIONS: dict[str, Handler] = {
    "createSession": create_session,
    "markAttendance": mark_attendance,
    "isSessionValid": is_session_valid,
    "hasAttended": has_attended,
    "getAttendanceRecord": get_attendance_record,
    "getTotalRecords": get_total_records,
    "getRecordByIndex": get_record_by_index,
    "authorizeTeacher": authorize_teacher,
    "registerStudent": register_student,
}

__all__ = ["ACTIONS", "Connector", "Handler"]
