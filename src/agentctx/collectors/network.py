"""Network collector: primary interface, SSID and local reachability.

``has_internet`` is a local heuristic (interface up with an IPv4 address);
no packets are sent.
"""

import re

from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.core.errors import CollectorTimeout
from agentctx.models.options import CollectOptions
from agentctx.models.report import Network
from agentctx.models.result import CollectorResult

_IP_ROUTE_DEV_RE = re.compile(r"\bdev\s+(\S+)")
_ROUTE_GET_IFACE_RE = re.compile(r"^\s*interface:\s*(\S+)", re.MULTILINE)
_AIRPORT_RE = re.compile(r"Current Wi-Fi Network:\s*(.+)$", re.MULTILINE)
_INET_RE = re.compile(r"\binet\s+\d{1,3}(?:\.\d{1,3}){3}\b")


def parse_default_interface(stdout: str) -> str:
    """Interface of the first ``ip route show default`` line."""
    for line in stdout.splitlines():
        match = _IP_ROUTE_DEV_RE.search(line)
        if match:
            return match.group(1)
    return ""


@CollectorRegistry.register
class NetworkCollector(BaseCollector[Network]):
    """Collects primary network interface details."""

    category = "network"

    def empty_data(self) -> Network:
        return Network(primary_interface="", has_internet=False)

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[Network]:
        warnings: list[str] = []
        route = self._run_soft("route", ["-n", "get", "default"], options)
        match = _ROUTE_GET_IFACE_RE.search(route or "")
        if not match:
            warnings.append("network: no default route")
            return CollectorResult(data=self.empty_data(), warnings=warnings)
        interface = match.group(1)

        ssid = None
        airport = self._run_soft("networksetup", ["-getairportnetwork", interface], options)
        if airport:
            ssid_match = _AIRPORT_RE.search(airport)
            ssid = ssid_match.group(1).strip() if ssid_match else None

        ifconfig = self._run_soft("ifconfig", [interface], options) or ""
        has_internet = "status: active" in ifconfig and bool(_INET_RE.search(ifconfig))

        return CollectorResult(
            data=Network(primary_interface=interface, ssid=ssid or None, has_internet=has_internet),
            warnings=warnings,
        )

    def collect_linux(self, options: CollectOptions) -> CollectorResult[Network]:
        warnings: list[str] = []
        route = self._run_soft("ip", ["route", "show", "default"], options)
        interface = parse_default_interface(route or "")
        if not interface:
            warnings.append("network: no default route")
            return CollectorResult(data=self.empty_data(), warnings=warnings)

        ssid = (self._run_soft("iwgetid", ["-r", interface], options) or "").strip() or None

        has_internet = False
        operstate = (self.read_text(f"/sys/class/net/{interface}/operstate") or "").strip()
        if operstate == "up":
            addr = self._run_soft("ip", ["-4", "addr", "show", interface], options) or ""
            has_internet = bool(_INET_RE.search(addr))

        return CollectorResult(
            data=Network(primary_interface=interface, ssid=ssid, has_internet=has_internet),
            warnings=warnings,
        )

    def _run_soft(self, command: str, args: list[str], options: CollectOptions) -> str | None:
        """Run a command, returning None on failure and raising only on timeout."""
        result = self.run(command, args, options)
        if result.timed_out:
            raise CollectorTimeout(command=command)
        return result.stdout if result.ok else None
