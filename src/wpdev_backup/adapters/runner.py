"""Thin wrapper over ``subprocess.run`` for external tools.

Every docker / wp-cli / mysql invocation goes through ``run_command`` so
failures surface as a single ``ExternalCommandFailure`` type and every
call leaves one debug log line with secrets masked.

Usage:
    from wpdev_backup.adapters.runner import run_command

    result = run_command(["docker", "ps", "-a", "--format", "{{.Names}}"])
    names = result.stdout.splitlines()

    # Stream a dump straight into a file
    run_command(["mysqldump", "wordpress"], stdout_path=Path("out.sql"))
"""

import contextlib
import logging
import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from wpdev_backup.errors import ExternalCommandFailure

logger = logging.getLogger(__name__)

# Argument prefixes whose value must never reach a log line
_SECRET_PREFIXES = ("--password=", "MYSQL_PWD=", "MYSQL_PASSWORD=")


@dataclass(frozen=True)
class CommandResult:
    """Captured result of a finished command."""

    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


def mask_secrets(argv: Sequence[str]) -> list[str]:
    """Return a copy of argv with password values replaced by ``***``."""
    masked: list[str] = []
    for arg in argv:
        for prefix in _SECRET_PREFIXES:
            if arg.startswith(prefix):
                arg = f"{prefix}***"
                break
        masked.append(arg)
    return masked


def format_command(argv: Sequence[str]) -> str:
    """Shell-quoted, secret-masked rendering of argv for logs and errors."""
    return shlex.join(mask_secrets(argv))


def run_command(
    argv: Sequence[str],
    *,
    stdin_path: Path | None = None,
    stdout_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external command and raise on any failure.

    Args:
        argv: Command and arguments (no shell).
        stdin_path: Optional file fed to the process on stdin.
        stdout_path: Optional file that receives stdout instead of capturing
            it.  The file is created (or truncated) before the process starts.
        env: Extra environment variables merged over ``os.environ``.
        timeout: Optional timeout in seconds.

    Returns:
        ``CommandResult`` with captured output (``stdout`` is empty when
        redirected to ``stdout_path``).

    Raises:
        ExternalCommandFailure: If the binary is missing, the command times
            out, or it exits non-zero.
    """
    argv = [str(a) for a in argv]
    display = format_command(argv)
    logger.debug("Running: %s", display)

    full_env = None
    if env:
        full_env = {**os.environ, **env}

    with contextlib.ExitStack() as stack:
        stdin_fh = stack.enter_context(open(stdin_path, "rb")) if stdin_path is not None else None
        stdout_fh = (
            stack.enter_context(open(stdout_path, "wb")) if stdout_path is not None else None
        )
        try:
            proc = subprocess.run(
                argv,
                stdin=stdin_fh,
                stdout=stdout_fh if stdout_fh is not None else subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=full_env,
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ExternalCommandFailure(
                f"Required command {argv[0]} not found",
                argv=mask_secrets(argv),
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalCommandFailure(
                f"Command timed out after {timeout}s: {display}",
                argv=mask_secrets(argv),
            ) from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace") if stdout_fh is None else ""
    stderr = (proc.stderr or b"").decode("utf-8", errors="replace").strip()

    if proc.returncode != 0:
        logger.debug("EXIT %s: %s\nSTDERR: %s", proc.returncode, display, stderr)
        raise ExternalCommandFailure(
            f"Command failed with exit code {proc.returncode}: {display}"
            + (f"\n{stderr}" if stderr else ""),
            argv=mask_secrets(argv),
            returncode=proc.returncode,
            stderr=stderr,
        )

    return CommandResult(
        argv=argv,
        returncode=proc.returncode,
        stdout=stdout,
        stderr=stderr,
    )
