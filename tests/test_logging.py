"""Tests for the stderr logger."""

import json

import pytest

from agentctx.core.logging import configure_logging, debug, error, info, warning


@pytest.fixture(autouse=True)
def reset_logging():
    configure_logging(log_format="text", quiet=False, verbose=False)
    yield
    configure_logging(log_format="text", quiet=False, verbose=False)


class TestLogging:
    def test_text_line_goes_to_stderr(self, capsys):
        warning("Invalid --timeout-ms, using default", value="abc", default=250)
        captured = capsys.readouterr()

        assert captured.out == ""
        assert captured.err == "[WARNING] Invalid --timeout-ms, using default value=abc default=250\n"

    def test_debug_needs_verbose(self, capsys):
        debug("hidden")
        assert capsys.readouterr().err == ""

        configure_logging(verbose=True)
        debug("shown", category="apps")
        assert capsys.readouterr().err == "[DEBUG] shown category=apps\n"

    def test_quiet_keeps_errors(self, capsys):
        configure_logging(quiet=True, verbose=True)
        debug("d")
        info("i")
        error("boom")
        assert capsys.readouterr().err == "[ERROR] boom\n"

    def test_json_format(self, capsys):
        configure_logging(log_format="json")
        info("Loaded config file", path="/tmp/a.yaml")

        entry = json.loads(capsys.readouterr().err)
        assert entry["level"] == "info"
        assert entry["message"] == "Loaded config file"
        assert entry["path"] == "/tmp/a.yaml"
        assert entry["thread"] == "MainThread"
        assert "timestamp" in entry
