"""Platform detection used to dispatch collector implementations."""

import sys
from typing import Literal

Platform = Literal["darwin", "linux", "unsupported"]


def get_platform(name: str | None = None) -> Platform:
    """Map a ``sys.platform`` value to a supported platform.

    Args:
        name: Platform string to classify (defaults to ``sys.platform``)
    """
    name = sys.platform if name is None else name
    if name == "darwin":
        return "darwin"
    if name.startswith("linux"):
        return "linux"
    return "unsupported"
