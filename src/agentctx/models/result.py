"""Collector result contract."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from agentctx.models.error import StructuredError
from agentctx.models.report import PermissionState

T = TypeVar("T")


@dataclass
class CollectorResult(Generic[T]):
    """Value returned by every collector.

    A collector never raises: failures are carried in ``error`` and
    ``warnings``. ``permission`` is only set by permission-gated collectors.
    """

    data: T | None = None
    warnings: list[str] = field(default_factory=list)
    error: StructuredError | None = None
    permission: PermissionState | None = None
    elapsed_ms: int | None = None

    @classmethod
    def empty(cls) -> "CollectorResult[T]":
        """Result contributed by a disabled collector."""
        return cls()
