"""Permission-state tracking for gated capabilities."""

from typing import get_args

from agentctx.models.report import PermissionState, Permissions

GATED_CAPABILITIES: tuple[str, ...] = ("accessibility", "calendar", "reminders")

# Category whose collector exercises each capability.
CAPABILITY_BY_CATEGORY: dict[str, str] = {
    "frontmost": "accessibility",
    "calendar": "calendar",
    "reminders": "reminders",
}

_VALID_STATES = frozenset(get_args(PermissionState))


class PermissionTracker:
    """Latest known state of each gated capability for one run.

    Written only by the orchestrator in response to a collector-reported
    observation; read once when the report is assembled.
    """

    def __init__(self) -> None:
        self._states: dict[str, PermissionState] = {
            key: "not_requested" for key in GATED_CAPABILITIES
        }

    def set(self, key: str, value: PermissionState) -> None:
        """Record the state observed for a capability.

        Raises:
            KeyError: If key is not a gated capability
            ValueError: If value is not a permission state
        """
        if key not in self._states:
            raise KeyError(f"Unknown capability: {key}")
        if value not in _VALID_STATES:
            raise ValueError(f"Invalid permission state: {value}")
        self._states[key] = value

    def get(self, key: str) -> PermissionState:
        return self._states[key]

    def snapshot(self) -> Permissions:
        """Return the current states as a Permissions model."""
        return Permissions(**self._states)
