"""Structured error handling for agentctx."""

import sys
from typing import Any, NoReturn

from agentctx.core.timing import iso_utc, utc_now
from agentctx.models.error import ErrorCode, StructuredError
from agentctx.models.report import Report


class AgentCtxError(Exception):
    """Base exception for agentctx errors.

    Carries an error code so that collectors can raise it internally and
    have the collector boundary turn it into a StructuredError.
    """

    code: str = ErrorCode.ERROR

    def __init__(self, message: str, code: str | None = None, context: dict[str, Any] | None = None):
        if code is not None:
            self.code = code
        self.message = message
        self.context = context
        super().__init__(message)

    def to_structured(self, module: str) -> StructuredError:
        """Convert to StructuredError attributed to a category."""
        return StructuredError(module=module, message=self.message, code=self.code)


class CollectorTimeout(AgentCtxError):
    """A collector's subprocess exceeded its deadline."""

    code = ErrorCode.TIMEOUT

    def __init__(self, message: str = "Timeout", command: str | None = None):
        super().__init__(message, context={"command": command} if command else None)


class PermissionDenied(AgentCtxError):
    """The OS denied a permission-gated capability."""

    code = ErrorCode.PERMISSION_DENIED

    def __init__(self, message: str, capability: str | None = None):
        super().__init__(message, context={"capability": capability} if capability else None)
        self.capability = capability


class CommandFailed(AgentCtxError):
    """A subprocess exited unsuccessfully."""

    code = ErrorCode.ERROR

    def __init__(self, command: str, stderr: str = ""):
        message = stderr.strip() or f"Command '{command}' failed"
        super().__init__(message, context={"command": command})


class UnsupportedPlatform(AgentCtxError):
    """The category is not implemented on the current platform."""

    code = ErrorCode.UNSUPPORTED

    def __init__(self, platform_name: str):
        super().__init__(
            f"Unsupported platform: {platform_name}",
            context={"platform": platform_name},
        )


class ConfigError(AgentCtxError):
    """The configuration file could not be read or validated."""

    def __init__(self, message: str, path: str | None = None, errors: list[str] | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        if errors:
            context["errors"] = errors
            message = f"{message}: {'; '.join(errors)}"
        super().__init__(message, context=context or None)


def handle_error(error: AgentCtxError | Exception, module: str = "agentctx", exit_code: int = 4) -> NoReturn:
    """Output a report carrying only the error, then exit.

    Used for failures that happen before a run starts, so the document
    still has the schema version, timestamp and permission states.

    Args:
        error: The error to handle
        module: Component the error is attributed to
        exit_code: Exit code to use
    """
    from agentctx.cli.output import output_json

    if isinstance(error, AgentCtxError):
        structured = error.to_structured(module)
    else:
        structured = StructuredError(module=module, message=str(error), code=ErrorCode.ERROR)

    output_json(Report(generated_at=iso_utc(utc_now()), errors=[structured]))
    sys.exit(exit_code)
