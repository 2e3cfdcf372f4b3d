"""Exit-code priority policy.

The run's exit code is a fold over collector outcomes into the highest
ranked code, so it does not depend on which collector finished first:
permission denied > timeout > other error > success.
"""

from collections.abc import Iterable
from enum import IntEnum

from agentctx.models.error import ErrorCode
from agentctx.models.result import CollectorResult


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    PERMISSION_DENIED = 2
    TIMEOUT = 3
    ERROR = 4


_RANK: dict[ExitCode, int] = {
    ExitCode.SUCCESS: 0,
    ExitCode.ERROR: 1,
    ExitCode.TIMEOUT: 2,
    ExitCode.PERMISSION_DENIED: 3,
}


def classify(result: CollectorResult) -> ExitCode:
    """Exit code implied by a single collector result."""
    if result.error is None:
        return ExitCode.SUCCESS
    if result.error.code == ErrorCode.PERMISSION_DENIED or result.permission == "denied":
        return ExitCode.PERMISSION_DENIED
    if result.error.code == ErrorCode.TIMEOUT:
        return ExitCode.TIMEOUT
    return ExitCode.ERROR


def highest(codes: Iterable[ExitCode]) -> ExitCode:
    """Highest-priority code among codes (SUCCESS when empty)."""
    return max(codes, key=_RANK.__getitem__, default=ExitCode.SUCCESS)


def exit_code_for(results: Iterable[CollectorResult]) -> ExitCode:
    """Fold collector results into the run's exit code."""
    return highest(classify(result) for result in results)
