"""Calendar collector (opt-in, permission-gated, redactable).

macOS only: upcoming events from Calendar.app via osascript. Event times are
emitted as second offsets from "now" to avoid locale-dependent date text.
"""

from datetime import datetime

from agentctx.collectors.base import AUTOMATION_DENIED_PATTERNS, BaseCollector, CollectorRegistry
from agentctx.core.redact import redacted_fields
from agentctx.core.timing import iso_from_offset, utc_now
from agentctx.models.options import CollectOptions
from agentctx.models.report import CalendarEvent
from agentctx.models.result import CollectorResult

MAX_EVENTS = 3
HORIZON_HOURS = 24

# Replaces tab, linefeed and return inside a field with a space, so every
# record stays on one line with exactly its own separators.
FLATTEN_HANDLER = """
on flatten(txt)
  set saved to AppleScript's text item delimiters
  set AppleScript's text item delimiters to {tab, linefeed, return}
  set parts to text items of (txt as text)
  set AppleScript's text item delimiters to " "
  set txt to parts as text
  set AppleScript's text item delimiters to saved
  return txt
end flatten
"""

# Emits "start offset<TAB>end offset<TAB>title<TAB>location" per event.
CALENDAR_SCRIPT = FLATTEN_HANDLER + f"""
set nowDate to current date
set horizon to nowDate + ({HORIZON_HOURS} * hours)
set out to ""
tell application "Calendar"
  repeat with c in calendars
    set evs to (every event of c whose start date is greater than or equal to nowDate and start date is less than or equal to horizon)
    repeat with e in evs
      set loc to location of e
      if loc is missing value then set loc to ""
      set ttl to summary of e
      if ttl is missing value then set ttl to ""
      set s to ((start date of e) - nowDate) as integer
      set f to ((end date of e) - nowDate) as integer
      set out to out & s & tab & f & tab & (my flatten(ttl)) & tab & (my flatten(loc)) & linefeed
    end repeat
  end repeat
end tell
return out
"""


def parse_offset(value: str) -> int:
    value = value.strip()
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"invalid time offset {value!r}") from None


@CollectorRegistry.register
class CalendarCollector(BaseCollector[list[CalendarEvent]]):
    """Collects the next few calendar events."""

    category = "calendar"
    capability = "calendar"

    def empty_data(self) -> list[CalendarEvent]:
        return []

    def now(self) -> datetime:
        return utc_now()

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[list[CalendarEvent]]:
        warnings: list[str] = []
        now = self.now()
        stdout = self.run_checked(
            "osascript",
            ["-e", CALENDAR_SCRIPT],
            options,
            denial_patterns=AUTOMATION_DENIED_PATTERNS,
            denial_message="Calendar permission required",
        )

        def parse(line: str) -> tuple[int, CalendarEvent]:
            parts = line.rstrip("\r").split("\t")
            if len(parts) < 2:
                raise ValueError("expected start and end offsets")
            start, end = parse_offset(parts[0]), parse_offset(parts[1])
            title = parts[2] if len(parts) > 2 else ""
            location = parts[3] if len(parts) > 3 else ""
            fields: dict = {}
            if title:
                fields.update(redacted_fields("title", title, options.redact))
            if location:
                fields.update(redacted_fields("location", location, options.redact))
            event = CalendarEvent(
                start=iso_from_offset(now, start),
                end=iso_from_offset(now, end),
                **fields,
            )
            return start, event

        parsed = self.parse_records(stdout.split("\n"), parse, warnings, redact=options.redact)
        parsed.sort(key=lambda item: item[0])
        events = [event for _, event in parsed[:MAX_EVENTS]]
        return CollectorResult(data=events, warnings=warnings, permission="granted")

    def collect_linux(self, options: CollectOptions) -> CollectorResult[list[CalendarEvent]]:
        return CollectorResult(data=[], warnings=["calendar: not available on linux"])
