"""agentctx CLI entry point."""

import sys
from pathlib import Path
from typing import Literal

import click

from agentctx import __version__
from agentctx.cli.output import output_json
from agentctx.core.config import load_config, resolve_options
from agentctx.core.errors import ConfigError, handle_error
from agentctx.core.exit_codes import ExitCode
from agentctx.core.logging import configure_logging, warning
from agentctx.core.orchestrator import collect_all
from agentctx.models.options import DEFAULT_TIMEOUT_MS, parse_timeout_ms

PRIVACY_EPILOG = """\b
Privacy & permissions:
  By default only safe system info is read (OS, machine, locale, frontmost
  app name). Clipboard, window titles, calendar and reminders are read only
  when the matching flag is passed. Accessibility is only needed for
  --frontmost-window; Calendar/Reminders permissions only for --calendar
  and --reminders. No screenshots, keystrokes or recording of any kind.

\b
Exit codes:
  0  success (possibly with warnings)
  2  a requested permission was denied
  3  a collector timed out
  4  another collector error occurred
"""


@click.command(epilog=PRIVACY_EPILOG)
@click.option("--pretty", is_flag=True, default=False, help="Pretty-print JSON")
@click.option(
    "--clipboard",
    is_flag=True,
    default=False,
    help="Include clipboard text (may prompt for pasteboard access)",
)
@click.option(
    "--frontmost-window",
    is_flag=True,
    default=False,
    help="Include frontmost window title (requires Accessibility permission)",
)
@click.option("--apps", is_flag=True, default=False, help="Include running apps (name, bundle_id, pid)")
@click.option("--battery", is_flag=True, default=False, help="Include battery percentage and charging state")
@click.option("--network", is_flag=True, default=False, help="Include primary interface, SSID, local reachability")
@click.option(
    "--calendar",
    is_flag=True,
    default=False,
    help="Include next calendar events (requires Calendar permission)",
)
@click.option(
    "--reminders",
    is_flag=True,
    default=False,
    help="Include reminders (requires Reminders permission)",
)
@click.option(
    "--redact",
    is_flag=True,
    default=False,
    help="Redact sensitive strings (clipboard, window title, event/reminder titles); output sha256 + length",
)
@click.option(
    "--timeout-ms",
    "timeout_ms",
    default=None,
    metavar="N",
    help=f"Per-module timeout in ms (default: {DEFAULT_TIMEOUT_MS})",
)
@click.option("--debug", is_flag=True, default=False, help="Include per-module timings under _debug")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    envvar="AGENTCTX_CONFIG",
    default=None,
    help="YAML config file with option defaults (env: AGENTCTX_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose logging to stderr")
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Log format for stderr (default: text)",
)
@click.version_option(version=__version__, prog_name="agentctx")
def cli(
    pretty: bool,
    clipboard: bool,
    frontmost_window: bool,
    apps: bool,
    battery: bool,
    network: bool,
    calendar: bool,
    reminders: bool,
    redact: bool,
    timeout_ms: str | None,
    debug: bool,
    config_path: Path | None,
    verbose: bool,
    log_format: Literal["text", "json"],
) -> None:
    """Print a single JSON object describing your current local context.

    Supports macOS and Linux. Read-only, no network calls to external
    services. Sensitive data is opt-in via flags.
    """
    configure_logging(log_format=log_format, verbose=verbose)

    if timeout_ms is not None and parse_timeout_ms(timeout_ms) != _as_int(timeout_ms):
        warning("Invalid --timeout-ms, using default", value=timeout_ms, default=DEFAULT_TIMEOUT_MS)

    try:
        file_config = load_config(config_path) if config_path else None
    except ConfigError as e:
        handle_error(e, module="config", exit_code=int(ExitCode.ERROR))

    options = resolve_options(
        file_config,
        timeout_ms=timeout_ms,
        pretty=pretty,
        clipboard=clipboard,
        frontmost_window=frontmost_window,
        apps=apps,
        battery=battery,
        network=network,
        calendar=calendar,
        reminders=reminders,
        redact=redact,
        debug=debug,
    )

    outcome = collect_all(options)
    output_json(outcome.report, pretty=options.pretty)
    sys.exit(int(outcome.exit_code))


def _as_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def main() -> None:
    """Main entry point.

    Usage errors and unexpected failures are reported as a JSON error
    document with exit code 4, so exit code 2 keeps meaning "permission
    denied".
    """
    try:
        cli.main(prog_name="agentctx", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        handle_error(e, module="cli", exit_code=int(ExitCode.ERROR))
    except Exception as e:
        handle_error(e, exit_code=int(ExitCode.ERROR))


if __name__ == "__main__":
    main()
