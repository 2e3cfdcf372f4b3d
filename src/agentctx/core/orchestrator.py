"""Collection orchestration.

Runs the mandatory collectors (host, then frontmost) one after another,
then every enabled optional collector concurrently, and merges all results
into a single Report. The orchestrator is the only writer of the report and
merges strictly after all collectors have finished.
"""

from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any

from agentctx.collectors import BaseCollector, CollectorRegistry
from agentctx.core.exec import Runner, run_command
from agentctx.core.exit_codes import ExitCode, exit_code_for
from agentctx.core.logging import debug
from agentctx.core.permissions import CAPABILITY_BY_CATEGORY, PermissionTracker
from agentctx.core.timing import iso_utc, timed, utc_now
from agentctx.models.error import ErrorCode, StructuredError
from agentctx.models.options import CollectOptions
from agentctx.models.report import DebugInfo, Report
from agentctx.models.result import CollectorResult

MANDATORY_CATEGORIES: tuple[str, ...] = ("host", "frontmost")

# Optional category -> CollectOptions flag enabling it.
OPTIONAL_CATEGORIES: dict[str, str] = {
    "apps": "include_apps",
    "clipboard": "include_clipboard",
    "battery": "include_battery",
    "network": "include_network",
    "calendar": "include_calendar",
    "reminders": "include_reminders",
}

# Merge order.
CATEGORIES: tuple[str, ...] = (*MANDATORY_CATEGORIES, *OPTIONAL_CATEGORIES)


@dataclass
class RunOutcome:
    """Report and exit code produced by one run."""

    report: Report
    exit_code: ExitCode
    results: dict[str, CollectorResult] = field(default_factory=dict)


class ContextOrchestrator:
    """Runs collectors for one snapshot and assembles the report."""

    def __init__(
        self,
        options: CollectOptions,
        collectors: Mapping[str, BaseCollector[Any]] | None = None,
        runner: Runner = run_command,
    ) -> None:
        """Initialize orchestrator.

        Args:
            options: Resolved run options
            collectors: Collector per category; categories missing here are
                created from CollectorRegistry
            runner: Command runner handed to registry-created collectors
        """
        self.options = options
        self._collectors: dict[str, BaseCollector[Any]] = dict(collectors or {})
        self._runner = runner

    def collector(self, category: str) -> BaseCollector[Any]:
        if category not in self._collectors:
            self._collectors[category] = CollectorRegistry.create(category, runner=self._runner)
        return self._collectors[category]

    def enabled(self, category: str) -> bool:
        if category in MANDATORY_CATEGORIES:
            return True
        return bool(getattr(self.options, OPTIONAL_CATEGORIES[category]))

    def run(self) -> RunOutcome:
        """Collect every category and build the report."""
        results: dict[str, CollectorResult] = {}
        # Instantiate up front so worker threads never touch the collector map.
        for category in CATEGORIES:
            if self.enabled(category):
                self.collector(category)

        with timed() as total:
            for category in MANDATORY_CATEGORIES:
                results[category] = self._run_one(category)
            results.update(self._run_optional())

        report = self._merge(results)
        exit_code = exit_code_for(results[category] for category in CATEGORIES)
        debug("Run complete", exit_code=int(exit_code), elapsed_ms=total.elapsed_ms)
        return RunOutcome(report=report, exit_code=exit_code, results=results)

    def _run_one(self, category: str) -> CollectorResult:
        debug("Collector starting", category=category)
        try:
            result = self.collector(category).collect(self.options)
        except Exception as e:
            result = _failure(category, e)
        debug(
            "Collector finished",
            category=category,
            elapsed_ms=result.elapsed_ms,
            error=result.error.code if result.error else None,
        )
        return result

    def _run_optional(self) -> dict[str, CollectorResult]:
        """Run enabled optional collectors concurrently; wait for all of them."""
        results: dict[str, CollectorResult] = {
            category: CollectorResult.empty()
            for category in OPTIONAL_CATEGORIES
            if not self.enabled(category)
        }
        enabled = [category for category in OPTIONAL_CATEGORIES if self.enabled(category)]
        if not enabled:
            return results

        with ThreadPoolExecutor(max_workers=len(enabled), thread_name_prefix="agentctx-") as executor:
            futures: dict[str, Future[CollectorResult]] = {
                category: executor.submit(self._run_one, category) for category in enabled
            }
            wait(futures.values())

        for category, future in futures.items():
            exc = future.exception()
            if exc is not None:
                results[category] = _failure(category, exc)
            else:
                results[category] = future.result()
        return results

    def _merge(self, results: Mapping[str, CollectorResult]) -> Report:
        """Fold results into a Report in fixed category order."""
        permissions = PermissionTracker()
        fields: dict[str, Any] = {}
        warnings: list[str] = []
        errors: list[StructuredError] = []
        timings: dict[str, int] = {}

        for category in CATEGORIES:
            result = results.get(category)
            if result is None:
                continue
            if result.data is not None:
                fields[category] = result.data
            warnings.extend(result.warnings)
            if result.error is not None:
                errors.append(result.error.model_copy(update={"module": category}))
            if result.permission is not None and category in CAPABILITY_BY_CATEGORY:
                permissions.set(CAPABILITY_BY_CATEGORY[category], result.permission)
            if result.elapsed_ms is not None and self.options.debug:
                timings[category] = result.elapsed_ms

        return Report(
            generated_at=iso_utc(utc_now()),
            permissions=permissions.snapshot(),
            warnings=warnings or None,
            errors=errors or None,
            debug=DebugInfo(timings_ms=timings) if self.options.debug else None,
            **fields,
        )


def _failure(category: str, exc: BaseException) -> CollectorResult:
    """Result for a collector that raised instead of returning."""
    debug("Collector task failed", category=category, error=repr(exc))
    return CollectorResult(
        error=StructuredError(
            module=category,
            message=str(exc) or type(exc).__name__,
            code=ErrorCode.ERROR,
        )
    )


def collect_all(options: CollectOptions, runner: Runner = run_command) -> RunOutcome:
    """Run one snapshot with registry collectors."""
    return ContextOrchestrator(options, runner=runner).run()
