"""Deterministic JSON output for agentctx.

stdout carries exactly one JSON document per run; object keys are sorted
at every depth so identical content always renders to identical bytes.
stderr carries logs and diagnostics.
"""

import json
import math
import sys
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel


def to_jsonable(data: Any) -> Any:
    """Convert data into plain JSON types ready for stable rendering.

    - Pydantic models are dumped by alias with None fields omitted.
    - Non-finite floats become None (rendered as ``null``).
    - Mapping keys become strings; list order is preserved.

    Raises:
        ValueError: If data contains a circular reference
        TypeError: If data contains a value with no JSON representation
    """
    active: set[int] = set()

    def convert(value: Any) -> Any:
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, Enum):
            return convert(value.value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else None
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, BaseModel):
            return convert(value.model_dump(by_alias=True, exclude_none=True))
        if is_dataclass(value) and not isinstance(value, type):
            return convert(asdict(value))

        if isinstance(value, (Mapping, list, tuple)):
            marker = id(value)
            if marker in active:
                raise ValueError("Circular reference detected")
            active.add(marker)
            try:
                if isinstance(value, Mapping):
                    return {str(k): convert(v) for k, v in value.items()}
                return [convert(item) for item in value]
            finally:
                active.discard(marker)

        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    return convert(data)


def stable_dumps(data: Any, pretty: bool = False) -> str:
    """Serialize data as JSON with sorted keys at every nesting level.

    Args:
        data: Report, pydantic model, or plain JSON-like data
        pretty: Indent by two spaces per level instead of compact output

    Returns:
        JSON text
    """
    plain = to_jsonable(data)
    if pretty:
        return json.dumps(plain, sort_keys=True, indent=2, ensure_ascii=False, allow_nan=False)
    return json.dumps(
        plain,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def output_json(data: Any, pretty: bool = False, file: Any = None) -> None:
    """Write one JSON document to stdout.

    Args:
        data: Data to output (dict, list, or Pydantic model)
        pretty: Pretty-print with two-space indentation
        file: Output file (defaults to stdout)
    """
    if file is None:
        file = sys.stdout

    file.write(stable_dumps(data, pretty=pretty))
    file.write("\n")
    file.flush()
