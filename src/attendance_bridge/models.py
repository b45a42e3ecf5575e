from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .chain.abi import to_checksum_address


@dataclass(frozen=True)
class AttendanceRecord:
    session_code: str
    class_id: str
    student_id: str
    student_address: str
    timestamp: int
    verified: bool

    @classmethod
    def from_abi(cls, value: Sequence[Any]) -> "AttendanceRecord":
        """Build a record from the decoded ``(string,string,string,address,uint256,bool)`` tuple."""
        if len(value) != 6:
            raise ValueError(f"Expected a 6-field attendance record, got {len(value)} fields")
        session_code, class_id, student_id, student_address, timestamp, verified = value
        return cls(
            session_code=str(session_code),
            class_id=str(class_id),
            student_id=str(student_id),
            student_address=to_checksum_address(str(student_address)),
            timestamp=int(timestamp),
            verified=bool(verified),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionCode": self.session_code,
            "classId": self.class_id,
            "studentId": self.student_id,
            "studentAddress": self.student_address,
            "timestamp": self.timestamp,
            "verified": self.verified,
        }


@dataclass(frozen=True)
class Submission:
    """A submitted mutating call; block data only when confirmation was awaited."""

    tx_hash: str
    block_number: Optional[int] = None
    status: Optional[int] = None

    @property
    def confirmed(self) -> bool:
        return self.block_number is not None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"txHash": self.tx_hash, "blockNumber": self.block_number}
        if self.status is not None:
            result["status"] = self.status
        return result


__all__ = ["AttendanceRecord", "Submission"]
