"""CLI output formatting utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Protocol, cast, runtime_checkable

from elmfmt.lib.serialization import to_jsonable

OutputFormat = Literal["text", "json"]


@runtime_checkable
class TextFormattable(Protocol):
    """Output dataclasses that provide a human-readable text format."""

    def format_text(self) -> str: ...


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat


def normalize_output_format(*, requested: str | None, json_mode: bool) -> OutputFormat:
    if json_mode:
        return "json"
    if requested is None or requested == "":
        return "text"

    normalized = requested.strip().lower()
    if normalized in {"text", "json"}:
        return cast("OutputFormat", normalized)
    raise SystemExit("--format must be one of: text, json")


def emit(value: Any, config: OutputConfig) -> None:
    """Emit one payload according to the configured output mode."""

    if config.format == "json":
        print(json.dumps(to_jsonable(value), sort_keys=True))
        return
    if isinstance(value, TextFormattable):
        print(value.format_text())
    else:
        print(json.dumps(to_jsonable(value), sort_keys=True, indent=2))
