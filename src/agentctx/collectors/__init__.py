"""Context collectors.

One collector per category. Importing this package registers every
collector with CollectorRegistry.
"""

from agentctx.collectors.apps import AppsCollector
from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.collectors.battery import BatteryCollector
from agentctx.collectors.calendar import CalendarCollector
from agentctx.collectors.clipboard import ClipboardCollector
from agentctx.collectors.frontmost import FrontmostCollector
from agentctx.collectors.host import HostCollector
from agentctx.collectors.network import NetworkCollector
from agentctx.collectors.reminders import RemindersCollector

__all__ = [
    "AppsCollector",
    "BaseCollector",
    "BatteryCollector",
    "CalendarCollector",
    "ClipboardCollector",
    "CollectorRegistry",
    "FrontmostCollector",
    "HostCollector",
    "NetworkCollector",
    "RemindersCollector",
]
