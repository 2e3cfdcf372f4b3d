"""Pydantic models for agentctx."""

from agentctx.models.error import ErrorCode, StructuredError
from agentctx.models.options import CollectOptions
from agentctx.models.report import SCHEMA_VERSION, PermissionState, Permissions, Report
from agentctx.models.result import CollectorResult

__all__ = [
    "CollectOptions",
    "CollectorResult",
    "ErrorCode",
    "PermissionState",
    "Permissions",
    "Report",
    "SCHEMA_VERSION",
    "StructuredError",
]
