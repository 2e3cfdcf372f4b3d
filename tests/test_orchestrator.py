"""
Tests for the collection orchestrator.

Tests verify:
- Mandatory collectors always run, disabled optional ones never do
- Optional collectors run concurrently and fail independently
- Merge order, error tagging, permission updates and debug timings
- Exit-code priority across collectors
"""

import json
import threading

from agentctx.cli.output import stable_dumps
from agentctx.collectors import CollectorRegistry
from agentctx.core.exit_codes import ExitCode
from agentctx.core.orchestrator import CATEGORIES, OPTIONAL_CATEGORIES, ContextOrchestrator
from agentctx.models.error import StructuredError
from agentctx.models.report import AppEntry, Battery, Network
from agentctx.models.result import CollectorResult

from tests.factories import HOST, ExplodingCollector, FakeRunner, StubCollector

BATTERY = Battery(percentage=0.5, is_charging=False, power_source="battery")


class SlowCommandCollector(StubCollector):
    """Collector whose only command hits its deadline."""

    def collect_linux(self, options):
        self.run_checked("slow-tool", [], options)
        return CollectorResult(data=Network(primary_interface="eth0", has_internet=True))


class TestSequencing:
    """Mandatory and optional collector scheduling."""

    def test_only_mandatory_collectors_by_default(self, make_options, mandatory_stubs):
        apps = StubCollector("apps", CollectorResult(data=[]))
        outcome = ContextOrchestrator(make_options(), {**mandatory_stubs, "apps": apps}).run()

        assert mandatory_stubs["host"].calls == 1
        assert mandatory_stubs["frontmost"].calls == 1
        assert apps.calls == 0
        assert outcome.report.apps is None
        assert outcome.exit_code is ExitCode.SUCCESS

    def test_disabled_collector_contributes_nothing(self, make_options, mandatory_stubs):
        noisy = StubCollector(
            "battery",
            CollectorResult(warnings=["battery: w"], error=StructuredError(module="battery", message="x")),
        )
        outcome = ContextOrchestrator(make_options(debug=True), {**mandatory_stubs, "battery": noisy}).run()

        assert outcome.report.warnings is None
        assert outcome.report.errors is None
        assert "battery" not in outcome.report.debug.timings_ms
        assert outcome.exit_code is ExitCode.SUCCESS

    def test_mandatory_failure_does_not_halt_run(self, make_options, mandatory_stubs):
        host = StubCollector("host", exc=RuntimeError("uname exploded"))
        battery = StubCollector("battery", CollectorResult(data=BATTERY))
        outcome = ContextOrchestrator(
            make_options(include_battery=True),
            {**mandatory_stubs, "host": host, "battery": battery},
        ).run()

        assert outcome.report.host is None
        assert outcome.report.battery == BATTERY
        assert outcome.report.frontmost is not None
        assert outcome.report.errors[0].module == "host"
        assert outcome.exit_code is ExitCode.ERROR

    def test_optional_collectors_run_concurrently(self, make_options, mandatory_stubs):
        barrier = threading.Barrier(2, timeout=5)

        class BarrierCollector(StubCollector):
            def collect_linux(self, options):
                barrier.wait()
                return super().collect_linux(options)

        collectors = {
            **mandatory_stubs,
            "battery": BarrierCollector("battery", CollectorResult(data=BATTERY)),
            "apps": BarrierCollector("apps", CollectorResult(data=[])),
        }
        outcome = ContextOrchestrator(make_options(include_battery=True, include_apps=True), collectors).run()

        # Both collectors would block on the barrier if run one after another.
        assert outcome.report.errors is None
        assert outcome.exit_code is ExitCode.SUCCESS


class TestFailureIsolation:
    """Concurrent collectors never affect each other."""

    def test_timeout_does_not_affect_sibling(self, make_options, mandatory_stubs):
        options = make_options(include_battery=True, include_network=True, timeout_ms=50)
        collectors = {
            **mandatory_stubs,
            "battery": StubCollector("battery", CollectorResult(data=BATTERY), delay=0.01),
            "network": SlowCommandCollector(
                "network",
                runner=FakeRunner().add("slow-tool", ok=False, timed_out=True, delay=0.05),
            ),
        }
        outcome = ContextOrchestrator(options, collectors).run()

        assert outcome.report.battery == BATTERY
        assert outcome.report.network is None
        assert [(e.module, e.code) for e in outcome.report.errors] == [("network", "timeout")]
        assert outcome.exit_code is ExitCode.TIMEOUT

    def test_permission_denied_beats_timeout(self, make_options, mandatory_stubs):
        frontmost = StubCollector(
            "frontmost",
            CollectorResult(
                error=StructuredError(module="frontmost", message="denied", code="permission_denied"),
                permission="denied",
            ),
        )
        apps = StubCollector(
            "apps",
            CollectorResult(error=StructuredError(module="apps", message="Timeout", code="timeout")),
        )
        outcome = ContextOrchestrator(
            make_options(include_apps=True),
            {**mandatory_stubs, "frontmost": frontmost, "apps": apps},
        ).run()

        assert outcome.exit_code is ExitCode.PERMISSION_DENIED
        assert outcome.report.permissions.accessibility == "denied"

    def test_crashed_worker_becomes_error(self, make_options, mandatory_stubs):
        collectors = {
            **mandatory_stubs,
            "apps": ExplodingCollector("apps"),
            "battery": StubCollector("battery", CollectorResult(data=BATTERY)),
        }
        outcome = ContextOrchestrator(make_options(include_apps=True, include_battery=True), collectors).run()

        assert outcome.report.battery == BATTERY
        assert outcome.report.errors == [StructuredError(module="apps", message="worker crashed", code="error")]
        assert outcome.exit_code is ExitCode.ERROR


class TestMerge:
    """Folding results into the report."""

    def test_warnings_follow_category_order(self, make_options, mandatory_stubs):
        collectors = {
            **mandatory_stubs,
            "host": StubCollector("host", CollectorResult(data=HOST, warnings=["h1"])),
            "apps": StubCollector("apps", CollectorResult(data=[], warnings=["a1", "a2"]), delay=0.05),
            "reminders": StubCollector("reminders", CollectorResult(data=[], warnings=["r1"])),
        }
        outcome = ContextOrchestrator(
            make_options(include_apps=True, include_reminders=True), collectors
        ).run()

        assert outcome.report.warnings == ["h1", "a1", "a2", "r1"]

    def test_errors_tagged_with_category(self, make_options, mandatory_stubs):
        battery = StubCollector(
            "battery",
            CollectorResult(error=StructuredError(module="something-else", message="boom", code="error")),
        )
        outcome = ContextOrchestrator(make_options(include_battery=True), {**mandatory_stubs, "battery": battery}).run()
        assert outcome.report.errors[0].module == "battery"

    def test_data_attached_with_warnings(self, make_options, mandatory_stubs):
        apps = StubCollector(
            "apps",
            CollectorResult(data=[AppEntry(name="zsh", bundle_id="zsh", pid=7)], warnings=["apps: skipped"]),
        )
        outcome = ContextOrchestrator(make_options(include_apps=True), {**mandatory_stubs, "apps": apps}).run()

        assert outcome.report.apps == [AppEntry(name="zsh", bundle_id="zsh", pid=7)]
        assert outcome.exit_code is ExitCode.SUCCESS

    def test_permission_states_recorded(self, make_options, mandatory_stubs):
        calendar = StubCollector("calendar", CollectorResult(data=[], permission="granted"))
        outcome = ContextOrchestrator(make_options(include_calendar=True), {**mandatory_stubs, "calendar": calendar}).run()

        permissions = outcome.report.permissions
        assert permissions.calendar == "granted"
        assert permissions.reminders == "not_requested"
        assert permissions.accessibility == "not_requested"

    def test_debug_timings(self, make_options, mandatory_stubs):
        outcome = ContextOrchestrator(make_options(debug=True), mandatory_stubs).run()
        assert set(outcome.report.debug.timings_ms) == {"host", "frontmost"}
        assert all(ms >= 0 for ms in outcome.report.debug.timings_ms.values())

    def test_no_timings_without_debug(self, make_options, mandatory_stubs):
        outcome = ContextOrchestrator(make_options(), mandatory_stubs).run()
        assert outcome.report.debug is None
        assert "_debug" not in json.loads(stable_dumps(outcome.report))

    def test_runs_do_not_share_state(self, make_options, mandatory_stubs):
        warn = StubCollector("apps", CollectorResult(data=[], warnings=["apps: w"]))
        first = ContextOrchestrator(make_options(include_apps=True), {**mandatory_stubs, "apps": warn}).run()
        second = ContextOrchestrator(make_options(), mandatory_stubs).run()

        assert first.report.warnings == ["apps: w"]
        assert second.report.warnings is None


class TestUnsupportedPlatform:
    """Registry collectors on a platform other than darwin/linux."""

    def test_every_collector_warns_without_error(self, make_options):
        runner = FakeRunner()
        collectors = {
            category: CollectorRegistry.create(category, runner=runner, platform_name="win32")
            for category in CATEGORIES
        }
        options = make_options(**{flag: True for flag in OPTIONAL_CATEGORIES.values()})
        outcome = ContextOrchestrator(options, collectors).run()

        assert outcome.exit_code is ExitCode.SUCCESS
        assert outcome.report.errors is None
        assert len(outcome.report.warnings) == len(CATEGORIES)
        assert all("unsupported platform 'win32'" in w for w in outcome.report.warnings)
        assert outcome.report.apps == []
        assert outcome.report.calendar == []
        assert outcome.report.host is None
        assert runner.calls == []
