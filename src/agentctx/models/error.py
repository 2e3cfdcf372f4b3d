"""Structured error model for agentctx."""

from pydantic import BaseModel, Field


class StructuredError(BaseModel):
    """Structured error entry in the report.

    Every collector failure is reported in this shape, tagged with the
    category that produced it.
    """

    module: str = Field(
        ...,
        description="Category that produced the error (e.g., 'calendar')",
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
    )

    code: str | None = Field(
        default=None,
        description="Error code",
        examples=["timeout", "permission_denied", "error", "unsupported"],
    )

    model_config = {"extra": "forbid"}


class ErrorCode:
    """Standard error codes for agentctx."""

    TIMEOUT = "timeout"
    PERMISSION_DENIED = "permission_denied"
    ERROR = "error"
    UNSUPPORTED = "unsupported"
