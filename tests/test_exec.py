"""Tests for subprocess execution with a deadline."""

import sys

from agentctx.core.exec import ExecResult, _decode, run_command


class TestRunCommand:
    def test_success_captures_stdout(self):
        result = run_command(sys.executable, ["-c", "print('hi')"], 5000)
        assert result.ok is True
        assert result.timed_out is False
        assert result.stdout.strip() == "hi"

    def test_nonzero_exit_is_not_ok(self):
        result = run_command(
            sys.executable, ["-c", "import sys; sys.stderr.write('nope'); sys.exit(3)"], 5000
        )
        assert result.ok is False
        assert result.timed_out is False
        assert result.stderr == "nope"

    def test_missing_binary_never_raises(self):
        result = run_command("agentctx-definitely-not-installed", [], 1000)
        assert result.ok is False
        assert result.timed_out is False
        assert result.stderr

    def test_deadline_expiry(self):
        result = run_command(sys.executable, ["-c", "import time; time.sleep(5)"], 100)
        assert result.timed_out is True
        assert result.ok is False

    def test_args_are_not_shell_interpreted(self):
        result = run_command(sys.executable, ["-c", "import sys; print(sys.argv[1])", "$HOME; echo x"], 5000)
        assert result.stdout.strip() == "$HOME; echo x"


class TestDecode:
    def test_decode_variants(self):
        assert _decode(None) == ""
        assert _decode(b"caf\xc3\xa9") == "café"
        assert _decode(b"\xff") == "�"
        assert _decode("text") == "text"

    def test_default_result_is_failure(self):
        assert ExecResult() == ExecResult(stdout="", stderr="", ok=False, timed_out=False)
