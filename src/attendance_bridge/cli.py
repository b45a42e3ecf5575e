"""
Attendance Bridge CLI

Invoke one attendance-contract operation and print one JSON object.

    attendance-bridge <action> [<json_payload>]

Actions:
  createSession        - Open an attendance session
  markAttendance       - Mark a student present (with pre-flight checks)
  isSessionValid       - Check whether a session is open
  hasAttended          - Check whether a student attended a session
  getAttendanceRecord  - Read one attendance record
  getTotalRecords      - Count all attendance records
  getRecordByIndex     - Read a record by position
  authorizeTeacher     - Grant a teacher address session rights
  registerStudent      - Bind a student ID to a wallet address

stdout carries only the JSON result (or error envelope); diagnostics go to
stderr.  Exit status is 0 on success and 1 on any failure.
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Optional

import click
from click.core import ParameterSource

from .client import LazyConnector
from .config import Settings, load_environment
from .dispatch import report_failure, run_action
from .errors import BridgeError, UsageError

# ============ Constants ============

try:
    VERSION = version("attendance-bridge")
except PackageNotFoundError:
    # Running from a source tree without an install
    VERSION = "0+unknown"

_FILE = click.Path(dir_okay=False, path_type=Path)
_POSITIVE = click.FloatRange(min=0, min_open=True)


# ============ Command ============


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=VERSION, prog_name="attendance-bridge")
@click.argument("action", required=False)
@click.argument("payload", required=False)
@click.option("--env-file", type=_FILE, default=None, help=".env file to load (default: ./.env)")
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint [ETH_RPC_URL / RPC_URL]")
@click.option(
    "--contract-address",
    "configured_address",
    default=None,
    help="Fallback contract address, used when CONTRACT_ADDRESS is unset",
)
@click.option("--deployment-file", type=_FILE, default=None, help="Deployment descriptor [DEPLOYMENT_FILE]")
@click.option("--abi", "abi_path", type=_FILE, default=None, help="Contract artifact with ABI [CONTRACT_ABI_PATH]")
@click.option("--gas-limit", type=click.IntRange(min=21_000), default=None, help="Gas ceiling [GAS_LIMIT]")
@click.option("--chain-id", type=click.IntRange(min=1), default=None, help="Chain ID [CHAIN_ID]")
@click.option("--timeout", type=_POSITIVE, default=None, help="Per-request RPC timeout, seconds [RPC_TIMEOUT]")
@click.option(
    "--wait/--no-wait",
    "wait_for_receipt",
    default=False,
    help="Wait for confirmation of mutating calls [WAIT_FOR_RECEIPT]",
)
@click.option("--receipt-timeout", type=_POSITIVE, default=None, help="Confirmation wait, seconds [RECEIPT_TIMEOUT]")
@click.option(
    "--stack/--no-stack",
    "include_stack",
    default=True,
    help="Include the traceback in error output [INCLUDE_STACK]",
)
@click.pass_context
def cli(
    ctx: click.Context,
    action: Optional[str],
    payload: Optional[str],
    env_file: Optional[Path],
    **overrides: Any,
) -> None:
    """Run one attendance-contract ACTION with an optional JSON PAYLOAD."""
    # Only options given on the command line override the environment
    explicit = {
        name: value
        for name, value in overrides.items()
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT
    }

    try:
        load_environment(env_file)
        settings = Settings.from_env().with_overrides(**explicit)
    except BridgeError as exc:
        ctx.exit(report_failure(exc, include_stack=explicit.get("include_stack", True)))

    connector = LazyConnector(settings)
    try:
        exit_code = run_action(action, payload, connector, include_stack=settings.include_stack)
    finally:
        connector.close()
    ctx.exit(exit_code)


# ============ Entry Points ============


def main() -> None:
    """Attendance bridge entry point."""
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass

    try:
        exit_code = cli.main(standalone_mode=False)
    except click.ClickException as exc:
        # Bad option values still owe the caller one JSON line
        exit_code = report_failure(UsageError(exc.format_message()), include_stack=False)
    except click.Abort:
        exit_code = report_failure(UsageError("Aborted"), include_stack=False)
    except Exception as exc:
        exit_code = report_failure(exc, include_stack=True)
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    main()
