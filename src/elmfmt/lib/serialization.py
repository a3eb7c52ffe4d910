"""JSON payloads for `--json` output and MCP tool results."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, cast


def to_jsonable(value: Any) -> Any:
    """Convert operation outputs to plain JSON values.

    Outcome variants are walked field by field so their `kind` tag is kept;
    config reports hold tuples, which become lists.
    """

    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_jsonable(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, dict):
        mapping = cast("dict[str, object]", value)
        return {key: to_jsonable(item) for key, item in mapping.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in cast("list[object] | tuple[object, ...]", value)]
    return value
