"""Reminders collector (opt-in, permission-gated, redactable)."""

from datetime import datetime

from agentctx.collectors.base import AUTOMATION_DENIED_PATTERNS, BaseCollector, CollectorRegistry
from agentctx.collectors.calendar import FLATTEN_HANDLER, parse_offset
from agentctx.core.redact import redacted_fields
from agentctx.core.timing import iso_from_offset, utc_now
from agentctx.models.options import CollectOptions
from agentctx.models.report import Reminder
from agentctx.models.result import CollectorResult

MAX_REMINDERS = 20

# Emits "title<TAB>due offset or empty<TAB>list name" per incomplete reminder.
REMINDERS_SCRIPT = FLATTEN_HANDLER + f"""
set nowDate to current date
set out to ""
set n to 0
tell application "Reminders"
  repeat with l in lists
    set lname to name of l
    repeat with r in (reminders of l whose completed is false)
      set d to due date of r
      if d is missing value then
        set dueText to ""
      else
        set dueText to ((d - nowDate) as integer) as string
      end if
      set out to out & (my flatten(name of r)) & tab & dueText & tab & (my flatten(lname)) & linefeed
      set n to n + 1
      if n is greater than or equal to {MAX_REMINDERS} then return out
    end repeat
  end repeat
end tell
return out
"""


@CollectorRegistry.register
class RemindersCollector(BaseCollector[list[Reminder]]):
    """Collects incomplete reminders."""

    category = "reminders"
    capability = "reminders"

    def empty_data(self) -> list[Reminder]:
        return []

    def now(self) -> datetime:
        return utc_now()

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[list[Reminder]]:
        warnings: list[str] = []
        now = self.now()
        stdout = self.run_checked(
            "osascript",
            ["-e", REMINDERS_SCRIPT],
            options,
            denial_patterns=AUTOMATION_DENIED_PATTERNS,
            denial_message="Reminders permission required",
        )

        def parse(line: str) -> Reminder:
            parts = line.rstrip("\r").split("\t")
            if len(parts) < 3:
                raise ValueError("expected title, due and list")
            title, due, list_name = parts[0], parts[1].strip(), parts[2].strip()
            fields: dict = redacted_fields("title", title, options.redact) if title else {}
            if due:
                fields["due"] = iso_from_offset(now, parse_offset(due))
            return Reminder(list_name=list_name or None, **fields)

        reminders = self.parse_records(stdout.split("\n"), parse, warnings, redact=options.redact)
        return CollectorResult(data=reminders[:MAX_REMINDERS], warnings=warnings, permission="granted")

    def collect_linux(self, options: CollectOptions) -> CollectorResult[list[Reminder]]:
        return CollectorResult(data=[], warnings=["reminders: not available on linux"])
