"""Subprocess execution with a deadline.

Collectors receive a ``Runner`` instead of calling subprocess directly, so
tests can substitute a fake that never spawns a process.
"""

import subprocess
from dataclasses import dataclass
from typing import Protocol

from agentctx.core.logging import debug


@dataclass(frozen=True)
class ExecResult:
    """Outcome of one external command."""

    stdout: str = ""
    stderr: str = ""
    ok: bool = False
    timed_out: bool = False


class Runner(Protocol):
    def __call__(self, command: str, args: list[str], timeout_ms: int) -> ExecResult: ...


def run_command(command: str, args: list[str], timeout_ms: int) -> ExecResult:
    """Run a command without a shell and capture its output.

    Never raises: a missing binary, an OS error and an expired deadline are
    all reported through the returned ExecResult. On timeout the child
    process is killed.

    Args:
        command: Executable name or path
        args: Argument list (passed verbatim, no shell)
        timeout_ms: Deadline in milliseconds

    Returns:
        ExecResult with decoded stdout/stderr
    """
    try:
        process = subprocess.run(
            [command, *args],
            capture_output=True,
            stdin=subprocess.DEVNULL,
            timeout=timeout_ms / 1000,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired as e:
        debug("Command timed out", command=command, timeout_ms=timeout_ms)
        return ExecResult(
            stdout=_decode(e.stdout),
            stderr=_decode(e.stderr),
            ok=False,
            timed_out=True,
        )
    except OSError as e:
        debug("Command could not be started", command=command, error=str(e))
        return ExecResult(stderr=str(e), ok=False)

    return ExecResult(
        stdout=process.stdout or "",
        stderr=process.stderr or "",
        ok=process.returncode == 0,
    )


def _decode(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
