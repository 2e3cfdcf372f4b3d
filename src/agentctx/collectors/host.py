"""Host identity collector: OS, version, architecture, locale, timezone."""

import locale
import os
import re

from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.core.errors import CollectorTimeout
from agentctx.models.options import CollectOptions
from agentctx.models.report import Host
from agentctx.models.result import CollectorResult

_VERSION_ID_RE = re.compile(r'^VERSION_ID="?([^"\n]+)"?', re.MULTILINE)
_PRETTY_NAME_RE = re.compile(r'^PRETTY_NAME="?([^"\n]+)"?', re.MULTILINE)


def parse_os_release(text: str) -> str:
    """Extract VERSION_ID (or PRETTY_NAME) from /etc/os-release content."""
    match = _VERSION_ID_RE.search(text) or _PRETTY_NAME_RE.search(text)
    return match.group(1).strip() if match else "unknown"


def normalize_locale(value: str | None) -> str | None:
    """Turn a POSIX locale like ``en_US.UTF-8`` into a BCP 47 tag."""
    if not value:
        return None
    tag = value.split(".", 1)[0].split("@", 1)[0]
    if tag in ("C", "POSIX", ""):
        return None
    return tag.replace("_", "-")


@CollectorRegistry.register
class HostCollector(BaseCollector[Host]):
    """Collects baseline machine identity. Always runs."""

    category = "host"

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[Host]:
        os_version = self._first_line("sw_vers", ["-productVersion"], options)
        machine = self._first_line("uname", ["-m"], options)
        return CollectorResult(
            data=Host(
                os="macos",
                os_version=os_version,
                machine=machine,
                locale=self._locale(),
                timezone=self._timezone(),
            )
        )

    def collect_linux(self, options: CollectOptions) -> CollectorResult[Host]:
        warnings: list[str] = []
        os_release = self.read_text("/etc/os-release")
        if os_release is None:
            warnings.append("host: /etc/os-release not readable")
            os_version = "unknown"
        else:
            os_version = parse_os_release(os_release)
        machine = self._first_line("uname", ["-m"], options)
        return CollectorResult(
            data=Host(
                os="linux",
                os_version=os_version,
                machine=machine,
                locale=self._locale(),
                timezone=self._timezone(),
            ),
            warnings=warnings,
        )

    def _first_line(self, command: str, args: list[str], options: CollectOptions) -> str:
        result = self.run(command, args, options)
        if result.timed_out:
            raise CollectorTimeout(command=command)
        if not result.ok:
            return "unknown"
        return result.stdout.strip().splitlines()[0] if result.stdout.strip() else "unknown"

    def _locale(self) -> str:
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            tag = normalize_locale(os.environ.get(var))
            if tag:
                return tag
        try:
            tag = normalize_locale(locale.getlocale()[0])
        except ValueError:
            tag = None
        return tag or "en-US"

    def _timezone(self) -> str:
        tz = os.environ.get("TZ", "").lstrip(":")
        if tz and "/" in tz and not tz.startswith("/"):
            return tz

        localtime = self.fs_root / "etc/localtime"
        try:
            target = os.readlink(localtime)
        except OSError:
            target = ""
        if "zoneinfo/" in target:
            return target.split("zoneinfo/", 1)[1]

        timezone_file = self.read_text("/etc/timezone")
        if timezone_file and timezone_file.strip():
            return timezone_file.strip()

        return "UTC"
