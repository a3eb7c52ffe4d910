"""Shared text formatting primitives for CLI output."""

from __future__ import annotations


def tabular(rows: list[list[str]], sep: str = "  ") -> str:
    """Align columns by max width per column.

    >>> tabular([["binary", "elm-format"], ["elm_version", "0.19"]])
    'binary       elm-format\\nelm_version  0.19'
    """
    if not rows:
        return ""
    col_count = max(len(row) for row in rows)
    widths = [max(len(row[col]) for row in rows if col < len(row)) for col in range(col_count)]
    lines = [
        sep.join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip()
        for row in rows
    ]
    return "\n".join(lines)


def kv_block(pairs: list[tuple[str, str | None]]) -> str:
    """Render key: value pairs, skipping None values."""
    return "\n".join(f"{k}: {v}" for k, v in pairs if v is not None)
