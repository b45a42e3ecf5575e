"""
Dispatch loop.

One invocation moves from DISPATCHING to TERMINATED exactly once, and
exactly one JSON object reaches stdout on the way: the handler result on
success, the error envelope on any failure.
"""

from __future__ import annotations

import json
import traceback
from typing import Any, Optional

import click

from . import console
from .actions import ACTIONS, Connector
from .errors import UnknownActionError, UsageError, ValidationError

USAGE = "Usage: attendance-bridge <action> [<json_payload>]"


def parse_payload(raw: Optional[str]) -> dict[str, Any]:
    """Decode the payload argument; an omitted payload is ``{}``."""
    if raw is None or not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be a JSON object")
    return payload


def dispatch(action: Optional[str], raw_payload: Optional[str], connect: Connector) -> dict[str, Any]:
    """
    Run one action.

    Raises:
        UsageError: No action given
        UnknownActionError: Action not in the table
        BridgeError: Whatever the handler raises
    """
    if not action:
        raise UsageError(USAGE)

    handler = ACTIONS.get(action)
    if handler is None:
        raise UnknownActionError(
            f"Unknown action: {action}. Expected one of: {', '.join(ACTIONS)}"
        )

    payload = parse_payload(raw_payload)
    console.note(f"dispatching {action}")
    return handler(payload, connect)


def error_envelope(exc: BaseException, include_stack: bool = True) -> dict[str, Any]:
    envelope: dict[str, Any] = {"success": False, "error": str(exc) or type(exc).__name__}
    if include_stack:
        envelope["stack"] = format_stack(exc)
    return envelope


def format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def emit(obj: dict[str, Any]) -> None:
    click.echo(json.dumps(obj, default=str))


def report_failure(exc: BaseException, include_stack: bool = True) -> int:
    """Log the failure in full on stderr and emit the error envelope."""
    console.fail(f"{type(exc).__name__}: {exc}")
    console.detail(format_stack(exc))
    emit(error_envelope(exc, include_stack=include_stack))
    return getattr(exc, "exit_code", 1)


def run_action(
    action: Optional[str],
    raw_payload: Optional[str],
    connect: Connector,
    include_stack: bool = True,
) -> int:
    """
    Dispatch, print exactly one JSON line, and return the exit status.
    """
    try:
        result = dispatch(action, raw_payload, connect)
    except Exception as exc:
        return report_failure(exc, include_stack=include_stack)

    emit(result)
    return 0
