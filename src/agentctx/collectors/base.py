"""Base collector interface for agentctx.

Every collector gathers one category of context data and returns a
CollectorResult. Platform dispatch happens inside the collector; the
orchestrator only ever calls ``collect``.
"""

import re
from abc import ABC
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, ClassVar, Generic, TypeVar

from agentctx.core.errors import (
    AgentCtxError,
    CollectorTimeout,
    CommandFailed,
    PermissionDenied,
    UnsupportedPlatform,
)
from agentctx.core.exec import ExecResult, Runner, run_command
from agentctx.core.logging import debug
from agentctx.core.platform import Platform, get_platform
from agentctx.core.timing import Timer
from agentctx.models.error import ErrorCode, StructuredError
from agentctx.models.options import CollectOptions
from agentctx.models.result import CollectorResult

T = TypeVar("T")
R = TypeVar("R")

# Phrases osascript prints when macOS refuses Apple Events or assistive access.
# Matching is best effort: an unrecognized denial is reported as a plain error.
AUTOMATION_DENIED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"not authori[sz]ed to send apple events", re.IGNORECASE),
    re.compile(r"not allowed to send", re.IGNORECASE),
    re.compile(r"not allowed assistive access", re.IGNORECASE),
    re.compile(r"\(-1743\)"),
)

ACCESSIBILITY_DENIED_PATTERNS: tuple[re.Pattern[str], ...] = (
    *AUTOMATION_DENIED_PATTERNS,
    re.compile(r"accessibility", re.IGNORECASE),
    re.compile(r"\(-1719\)"),
)


def is_denied(stderr: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Check a failing command's diagnostics for a known denial phrase."""
    return any(p.search(stderr) for p in patterns)


class BaseCollector(ABC, Generic[T]):
    """Base class for all collectors.

    Subclasses implement ``collect_darwin`` and/or ``collect_linux``. Those
    may raise AgentCtxError subclasses; ``collect`` converts every
    exception into a StructuredError so that it never raises.
    """

    category: ClassVar[str]
    # Gated capability exercised by this collector, if any.
    capability: ClassVar[str | None] = None

    def __init__(
        self,
        runner: Runner = run_command,
        platform_name: str | None = None,
        fs_root: Path = Path("/"),
    ) -> None:
        """Initialize collector.

        Args:
            runner: Command runner (injected in tests)
            platform_name: ``sys.platform``-style override
            fs_root: Root for files read directly (e.g. /sys, /proc)
        """
        self.runner = runner
        self.platform: Platform = get_platform(platform_name)
        self.platform_name = platform_name
        self.fs_root = fs_root

    def collect(self, options: CollectOptions) -> CollectorResult[T]:
        """Gather this category. Never raises."""
        timer = Timer().start()
        try:
            if self.platform == "darwin":
                result = self.collect_darwin(options)
            elif self.platform == "linux":
                result = self.collect_linux(options)
            else:
                result = self.unsupported()
        except CollectorTimeout as e:
            result = CollectorResult(
                warnings=[f"{self.category}: timeout"],
                error=e.to_structured(self.category),
            )
        except PermissionDenied as e:
            result = CollectorResult(
                error=e.to_structured(self.category),
                permission="denied" if self.capability else None,
            )
        except AgentCtxError as e:
            result = CollectorResult(error=e.to_structured(self.category))
        except Exception as e:
            debug("Collector raised", category=self.category, error=repr(e))
            result = CollectorResult(
                error=StructuredError(module=self.category, message=str(e) or type(e).__name__, code=ErrorCode.ERROR)
            )
        result.elapsed_ms = timer.stop()
        return result

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[T]:
        raise UnsupportedPlatform("darwin")

    def collect_linux(self, options: CollectOptions) -> CollectorResult[T]:
        raise UnsupportedPlatform("linux")

    def empty_data(self) -> T | None:
        """Payload reported where the category is not gathered."""
        return None

    def unsupported(self) -> CollectorResult[T]:
        """Result on a platform outside darwin/linux: empty data and a warning."""
        name = self.platform_name or "unknown"
        return CollectorResult(
            data=self.empty_data(),
            warnings=[f"{self.category}: unsupported platform '{name}'"],
        )

    def run(self, command: str, args: list[str], options: CollectOptions) -> ExecResult:
        """Run a command with the configured per-module timeout."""
        return self.runner(command, args, options.timeout_ms)

    def run_checked(
        self,
        command: str,
        args: list[str],
        options: CollectOptions,
        denial_patterns: Iterable[re.Pattern[str]] = (),
        denial_message: str | None = None,
    ) -> str:
        """Run a command and return its stdout, raising on failure.

        Raises:
            CollectorTimeout: If the deadline expired
            PermissionDenied: If stderr matches a denial pattern
            CommandFailed: On any other unsuccessful exit
        """
        result = self.run(command, args, options)
        if result.timed_out:
            raise CollectorTimeout(command=command)
        if not result.ok:
            if is_denied(result.stderr, denial_patterns):
                raise PermissionDenied(
                    denial_message or f"Permission denied running {command}",
                    capability=self.capability,
                )
            raise CommandFailed(command, result.stderr)
        return result.stdout

    def read_text(self, path: str) -> str | None:
        """Read a file under fs_root, returning None if it is unreadable."""
        try:
            return (self.fs_root / path.lstrip("/")).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def parse_records(
        self,
        lines: Iterable[str],
        parse: Callable[[str], R | None],
        warnings: list[str],
        redact: bool = False,
    ) -> list[R]:
        """Parse line-oriented output, dropping malformed records.

        ``parse`` returns a record, returns None to skip a line silently, or
        raises ValueError for a malformed one. Each malformed line is dropped
        and reported as a warning naming it. With ``redact`` the warning
        names the line number only, since the line holds sensitive text.
        """
        records: list[R] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = parse(line)
            except ValueError as e:
                if redact:
                    warnings.append(f"{self.category}: skipped malformed record at line {lineno}")
                else:
                    warnings.append(f"{self.category}: skipped malformed record {line.strip()!r} ({e})")
                continue
            if record is not None:
                records.append(record)
        return records


class CollectorRegistry:
    """Registry of available collectors, keyed by category."""

    _collectors: ClassVar[dict[str, type[BaseCollector[Any]]]] = {}

    @classmethod
    def register(cls, collector_class: type[BaseCollector[Any]]) -> type[BaseCollector[Any]]:
        """Register a collector class.

        Args:
            collector_class: Collector class to register

        Returns:
            The registered class (for use as decorator)
        """
        cls._collectors[collector_class.category] = collector_class
        return collector_class

    @classmethod
    def create(cls, category: str, **kwargs: Any) -> BaseCollector[Any]:
        """Instantiate the collector for a category.

        Raises:
            KeyError: If no collector is registered for the category
        """
        collector_class = cls._collectors.get(category)
        if collector_class is None:
            raise KeyError(f"No collector registered for category '{category}'")
        return collector_class(**kwargs)
