"""Battery collector."""

import re

from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.models.options import CollectOptions
from agentctx.models.report import Battery
from agentctx.models.result import CollectorResult

POWER_SUPPLY_DIR = "sys/class/power_supply"

_PMSET_SOURCE_RE = re.compile(r"drawing from '([^']+)'")
_PMSET_BATTERY_RE = re.compile(r"InternalBattery[^\t]*\t\s*(\S+)%;\s*([^;]+);")


def power_source_for(status: str) -> str:
    """Power source implied by a battery status string."""
    status = status.strip().lower()
    if status in ("charging", "full", "charged", "finishing charge", "ac attached", "not charging"):
        return "ac"
    if status == "discharging":
        return "battery"
    return "unknown"


def parse_pmset(stdout: str, warnings: list[str]) -> Battery | None:
    """Parse ``pmset -g batt`` output. Returns None when no battery is listed."""
    source_match = _PMSET_SOURCE_RE.search(stdout)
    battery_match = _PMSET_BATTERY_RE.search(stdout)
    if not battery_match:
        return None

    raw_percent, status = battery_match.group(1), battery_match.group(2).strip().lower()
    try:
        percentage = min(1.0, max(0.0, int(raw_percent) / 100))
    except ValueError:
        warnings.append(f"battery: skipped malformed percentage {raw_percent!r}")
        percentage = 0.0

    if source_match:
        source = source_match.group(1).lower()
        power_source = "ac" if "ac" in source.split() else "battery" if "battery" in source else "unknown"
    else:
        power_source = power_source_for(status)

    return Battery(
        percentage=percentage,
        is_charging=status in ("charging", "finishing charge"),
        power_source=power_source,
    )


@CollectorRegistry.register
class BatteryCollector(BaseCollector[Battery]):
    """Collects battery charge and power source."""

    category = "battery"

    def empty_data(self) -> Battery:
        return Battery(percentage=0, is_charging=False, power_source="unknown")

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[Battery]:
        warnings: list[str] = []
        stdout = self.run_checked("pmset", ["-g", "batt"], options)
        battery = parse_pmset(stdout, warnings)
        if battery is None:
            warnings.append("battery: no internal battery found")
            battery = self.empty_data()
        return CollectorResult(data=battery, warnings=warnings)

    def collect_linux(self, options: CollectOptions) -> CollectorResult[Battery]:
        warnings: list[str] = []
        supply = self._find_battery()
        if supply is None:
            warnings.append("battery: no battery found under /sys/class/power_supply")
            return CollectorResult(data=self.empty_data(), warnings=warnings)

        capacity = (self.read_text(f"{POWER_SUPPLY_DIR}/{supply}/capacity") or "").strip()
        status = (self.read_text(f"{POWER_SUPPLY_DIR}/{supply}/status") or "").strip().lower()

        try:
            percentage = min(1.0, max(0.0, int(capacity) / 100))
        except ValueError:
            warnings.append(f"battery: skipped malformed capacity {capacity!r} for {supply}")
            percentage = 0.0

        return CollectorResult(
            data=Battery(
                percentage=percentage,
                is_charging=status in ("charging", "full"),
                power_source=power_source_for(status),
            ),
            warnings=warnings,
        )

    def _find_battery(self) -> str | None:
        base = self.fs_root / POWER_SUPPLY_DIR
        try:
            names = sorted(p.name for p in base.iterdir())
        except OSError:
            return None
        batteries = [name for name in names if name.startswith("BAT")]
        return batteries[0] if batteries else None
