from __future__ import annotations

from typing import Any

import jsonschema
from jsonschema import FormatChecker

from .errors import ValidationError

UINT256_MAX = 2**256 - 1

_ADDRESS = {"type": "string", "pattern": "^0x[0-9a-fA-F]{40}$"}
_TEXT = {"type": "string"}
_INDEX = {
    "anyOf": [
        {"type": "integer", "minimum": 0, "maximum": UINT256_MAX},
        {"type": "string", "pattern": "^[0-9]+$", "maxLength": 78},
    ]
}


def _schema(properties: dict[str, Any]) -> dict[str, Any]:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": properties,
    }


# Required fields are checked separately so that every missing field is
# reported in one message; the schemas only constrain present values.
SCHEMAS: dict[str, dict[str, Any]] = {
    "createSession": _schema({
        "sessionCode": _TEXT,
        "classId": _TEXT,
        "durationMinutes": {"type": "integer", "minimum": 1, "maximum": UINT256_MAX},
    }),
    "markAttendance": _schema({
        "sessionCode": _TEXT,
        "studentId": _TEXT,
        "classId": _TEXT,
    }),
    "isSessionValid": _schema({"sessionCode": _TEXT}),
    "hasAttended": _schema({"sessionCode": _TEXT, "studentId": _TEXT}),
    "getAttendanceRecord": _schema({"sessionCode": _TEXT, "studentId": _TEXT}),
    "getTotalRecords": _schema({}),
    "getRecordByIndex": _schema({"index": _INDEX}),
    "authorizeTeacher": _schema({"teacherAddress": _ADDRESS}),
    "registerStudent": _schema({"studentId": _TEXT, "studentAddress": _ADDRESS}),
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def require_fields(payload: dict[str, Any], *names: str) -> None:
    """
    Fail unless every named field is present and non-empty.

    ``0`` and ``False`` count as present.

    Raises:
        ValidationError: Naming all missing fields
    """
    missing = [name for name in names if _is_missing(payload.get(name))]
    if not missing:
        return
    label = "field" if len(missing) == 1 else "fields"
    raise ValidationError(f"Missing required {label}: {', '.join(missing)}")


def check_payload(action: str, payload: dict[str, Any]) -> None:
    """
    Validate present payload values against the action's schema.

    Raises:
        ValidationError: Listing every schema violation
    """
    schema = SCHEMAS.get(action)
    if schema is None:
        return

    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema, format_checker=FormatChecker())
    errors = sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path])
    if errors:
        formatted = "; ".join(_format_error(err) for err in errors)
        raise ValidationError(f"Invalid payload for {action}: {formatted}")


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


def as_uint256(payload: dict[str, Any], name: str) -> int:
    """
    Convert a schema-checked numeric field to an ``int`` within uint256.

    ``30.0`` becomes ``30`` and digit strings are parsed.

    Raises:
        ValidationError: If the value does not fit in 256 bits
    """
    value = int(payload[name])
    if not 0 <= value <= UINT256_MAX:
        raise ValidationError(f"Invalid payload: {name}: {payload[name]!r} does not fit in uint256")
    return value
