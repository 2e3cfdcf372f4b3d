"""Running applications collector."""

import re

from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.models.options import CollectOptions
from agentctx.models.report import AppEntry
from agentctx.models.result import CollectorResult

MAX_APPS = 50

# Emits "name<TAB>pid<TAB>bundle id" per foreground process.
APPS_SCRIPT = f"""
tell application "System Events"
  set out to ""
  set procs to (every process whose background only is false)
  set n to (count of procs)
  if n > {MAX_APPS} then set n to {MAX_APPS}
  repeat with i from 1 to n
    set p to item i of procs
    set pname to name of p
    set pid to unix id of p
    set bid to ""
    try
      set bid to bundle identifier of p
    end try
    if bid is missing value then set bid to ""
    set out to out & pname & tab & (pid as string) & tab & bid & return
  end repeat
  return out
end tell
"""

_PS_LINE_RE = re.compile(r"^\s*(\S+)\s+(.+)$")


def parse_pid(value: str) -> int:
    """Parse a pid field, rejecting non-numeric and non-positive values."""
    value = value.strip()
    if not value.isdigit() or int(value) <= 0:
        raise ValueError(f"invalid pid {value!r}")
    return int(value)


def parse_osascript_line(line: str) -> AppEntry:
    parts = line.split("\t")
    if len(parts) < 2:
        raise ValueError("expected name and pid")
    name = parts[0].strip() or "unknown"
    pid = parse_pid(parts[1])
    bundle_id = parts[2].strip() if len(parts) > 2 else ""
    return AppEntry(name=name, bundle_id=bundle_id or name, pid=pid)


def parse_ps_line(line: str) -> AppEntry:
    match = _PS_LINE_RE.match(line)
    if not match:
        raise ValueError("expected pid and command")
    pid = parse_pid(match.group(1))
    name = match.group(2).strip() or "unknown"
    return AppEntry(name=name, bundle_id=name, pid=pid)


@CollectorRegistry.register
class AppsCollector(BaseCollector[list[AppEntry]]):
    """Collects running applications (macOS) or processes (Linux)."""

    category = "apps"

    def empty_data(self) -> list[AppEntry]:
        return []

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[list[AppEntry]]:
        warnings: list[str] = []
        stdout = self.run_checked("osascript", ["-e", APPS_SCRIPT], options)
        lines = stdout.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        apps = self.parse_records(lines, parse_osascript_line, warnings)
        return CollectorResult(data=apps[:MAX_APPS], warnings=warnings)

    def collect_linux(self, options: CollectOptions) -> CollectorResult[list[AppEntry]]:
        warnings: list[str] = []
        stdout = self.run_checked("ps", ["-e", "-o", "pid=", "-o", "comm="], options)
        apps = self.parse_records(stdout.splitlines(), parse_ps_line, warnings)
        # Newest processes first.
        apps.sort(key=lambda a: a.pid, reverse=True)
        return CollectorResult(data=apps[:MAX_APPS], warnings=warnings)
