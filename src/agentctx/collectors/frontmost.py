"""Frontmost application collector.

App name and bundle id are always gathered. The window title is only read
with ``--frontmost-window`` and needs the accessibility permission on macOS.
"""

from agentctx.collectors.base import (
    ACCESSIBILITY_DENIED_PATTERNS,
    BaseCollector,
    CollectorRegistry,
    is_denied,
)
from agentctx.core.errors import CollectorTimeout
from agentctx.core.redact import redacted_fields
from agentctx.models.error import ErrorCode, StructuredError
from agentctx.models.options import CollectOptions
from agentctx.models.report import Frontmost
from agentctx.models.result import CollectorResult

FRONT_APP_SCRIPT = (
    'tell application "System Events" to get name of first application process '
    "whose frontmost is true"
)
FRONT_WINDOW_SCRIPT = (
    'tell application "System Events" to tell (first application process '
    "whose frontmost is true) to get name of front window"
)


def bundle_id_script(app_name: str) -> str:
    escaped = app_name.replace("\\", "\\\\").replace('"', '\\"')
    return f'id of application "{escaped}"'


@CollectorRegistry.register
class FrontmostCollector(BaseCollector[Frontmost]):
    """Collects the foreground application."""

    category = "frontmost"
    capability = "accessibility"

    def empty_data(self) -> Frontmost:
        return Frontmost(app_name="Unknown", bundle_id="unknown")

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[Frontmost]:
        warnings: list[str] = []
        app_name = self.run_checked(
            "osascript",
            ["-e", FRONT_APP_SCRIPT],
            options,
            denial_patterns=ACCESSIBILITY_DENIED_PATTERNS,
            denial_message="Accessibility permission required for frontmost app",
        ).strip() or "Unknown"

        id_result = self.run("osascript", ["-e", bundle_id_script(app_name)], options)
        bundle_id = id_result.stdout.strip() if id_result.ok else ""
        frontmost = Frontmost(app_name=app_name, bundle_id=bundle_id or "unknown")

        if options.include_frontmost_window:
            window = self.run("osascript", ["-e", FRONT_WINDOW_SCRIPT], options)
            if window.timed_out:
                warnings.append("frontmost window: timeout")
            elif not window.ok:
                if is_denied(window.stderr, ACCESSIBILITY_DENIED_PATTERNS):
                    return CollectorResult(
                        data=frontmost,
                        warnings=warnings,
                        error=StructuredError(
                            module=self.category,
                            message="Accessibility permission required for window title",
                            code=ErrorCode.PERMISSION_DENIED,
                        ),
                        permission="denied",
                    )
                warnings.append(f"frontmost window: {window.stderr.strip() or 'unknown'}")
            else:
                frontmost = frontmost.model_copy(
                    update=redacted_fields("window_title", window.stdout.strip(), options.redact)
                )

        return CollectorResult(data=frontmost, warnings=warnings, permission="granted")

    def collect_linux(self, options: CollectOptions) -> CollectorResult[Frontmost]:
        warnings: list[str] = []
        # xdotool only works under X11; Wayland sessions fall back to Unknown.
        pid_result = self.run("xdotool", ["getactivewindow", "getwindowpid"], options)
        if pid_result.timed_out:
            raise CollectorTimeout(command="xdotool")

        frontmost = self.empty_data()
        if pid_result.ok and pid_result.stdout.strip():
            pid = pid_result.stdout.strip()
            if pid.isdigit():
                comm = self.read_text(f"/proc/{pid}/comm")
                if comm and comm.strip():
                    name = comm.strip()
                    frontmost = Frontmost(app_name=name, bundle_id=name)
            else:
                warnings.append(f"frontmost: skipped malformed record {pid!r} (pid is not numeric)")
        else:
            warnings.append(
                "frontmost: xdotool not available or no X11 (e.g. Wayland); install xdotool for X11"
            )

        if options.include_frontmost_window and pid_result.ok:
            title = self.run("xdotool", ["getactivewindow", "getwindowname"], options)
            if title.timed_out:
                warnings.append("frontmost window: timeout")
            elif title.ok:
                frontmost = frontmost.model_copy(
                    update=redacted_fields("window_title", title.stdout.strip(), options.redact)
                )
            else:
                warnings.append(f"frontmost window: {title.stderr.strip() or 'unknown'}")

        return CollectorResult(data=frontmost, warnings=warnings)
