"""
Role actions - authorize teachers and register student wallets.
"""

from __future__ import annotations

from typing import Any

from ..chain.abi import to_checksum_address
from ._common import Connector, remote_call, submission_message, validate


def authorize_teacher(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    validate("authorizeTeacher", payload, "teacherAddress")
    teacher_address = payload["teacherAddress"]

    contract = connect()
    with remote_call("authorizeTeacher"):
        submission = contract.transact("authorizeTeacher", to_checksum_address(teacher_address))

    return {
        "success": True,
        **submission.to_dict(),
        "teacherAddress": teacher_address,
        "message": submission_message(submission),
    }


def register_student(payload: dict[str, Any], connect: Connector) -> dict[str, Any]:
    """Bind a student ID to a wallet address."""
    validate("registerStudent", payload, "studentId", "studentAddress")
    student_id = payload["studentId"]
    student_address = payload["studentAddress"]

    contract = connect()
    with remote_call("registerStudent"):
        submission = contract.transact(
            "registerStudent", student_id, to_checksum_address(student_address)
        )

    return {
        "success": True,
        **submission.to_dict(),
        "studentId": student_id,
        "studentAddress": student_address,
        "message": submission_message(submission),
    }
