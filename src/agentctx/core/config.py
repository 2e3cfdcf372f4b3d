"""Configuration file loading and option resolution.

A YAML (or JSON) file can provide defaults for every option. Command-line
flags enable features on top of those defaults, and an explicit
``--timeout-ms`` overrides the file.

Example::

    apps: true
    network: true
    redact: true
    timeout_ms: 500
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from agentctx.core.errors import ConfigError
from agentctx.core.logging import debug
from agentctx.models.options import CollectOptions, parse_timeout_ms


class FileConfig(BaseModel):
    """Options as they appear in a config file."""

    pretty: bool = False
    clipboard: bool = False
    frontmost_window: bool = False
    apps: bool = False
    battery: bool = False
    network: bool = False
    calendar: bool = False
    reminders: bool = False
    redact: bool = False
    debug: bool = False
    timeout_ms: Any = None

    model_config = {"extra": "forbid"}


def load_config(path: Path) -> FileConfig:
    """Load and validate a config file.

    Args:
        path: Path to a YAML or JSON file

    Returns:
        Validated FileConfig

    Raises:
        ConfigError: If the file is missing, unparsable or invalid
    """
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e.strerror or e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}", path=str(path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a mapping", path=str(path))

    normalized = {str(key).replace("-", "_"): value for key, value in raw.items()}

    try:
        config = FileConfig(**normalized)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ConfigError("Config file failed validation", path=str(path), errors=errors) from e

    debug("Loaded config file", path=str(path))
    return config


def resolve_options(
    file_config: FileConfig | None = None,
    timeout_ms: Any = None,
    **flags: bool,
) -> CollectOptions:
    """Merge config-file defaults with command-line flags.

    Args:
        file_config: Defaults from a config file, if any
        timeout_ms: Raw ``--timeout-ms`` value (None when not given)
        **flags: Command-line booleans keyed like FileConfig fields

    Returns:
        Resolved CollectOptions
    """
    base = file_config or FileConfig()

    def enabled(name: str) -> bool:
        return bool(flags.get(name)) or getattr(base, name)

    timeout = timeout_ms if timeout_ms is not None else base.timeout_ms

    return CollectOptions(
        pretty=enabled("pretty"),
        include_clipboard=enabled("clipboard"),
        include_frontmost_window=enabled("frontmost_window"),
        include_apps=enabled("apps"),
        include_battery=enabled("battery"),
        include_network=enabled("network"),
        include_calendar=enabled("calendar"),
        include_reminders=enabled("reminders"),
        redact=enabled("redact"),
        debug=enabled("debug"),
        timeout_ms=parse_timeout_ms(timeout),
    )
