"""Text cleanup and line-number extraction for elm-format error reports."""

from __future__ import annotations

import re

# SGR sequences with or without the leading ESC byte; some terminals and
# Windows builds of elm-format drop the ESC and leave the bracket code behind.
_ANSI_SGR_RE = re.compile(r"\x1b?\[\d{1,3}(?:;\d{1,3})*m")
_ANSI_CSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")

_ERROR_BANNERS: tuple[str, ...] = (
    "I ran into something unexpected when parsing your code!",
    "-- SYNTAX PROBLEM",
)
_PREAMBLE_RE = re.compile(
    r"[\s\S]*(?=" + "|".join(re.escape(banner) for banner in _ERROR_BANNERS) + r")",
    re.IGNORECASE,
)

_GUTTER_RE = re.compile(r"(\d+)│")


def strip_ansi(text: str) -> str:
    """Remove terminal color/control sequences; applying it twice is a no-op."""

    # Removing one sequence can splice two fragments into a new one, so strip
    # until nothing changes.
    previous = None
    cleaned = text
    while cleaned != previous:
        previous = cleaned
        cleaned = _ANSI_CSI_RE.sub("", cleaned)
        cleaned = _ANSI_SGR_RE.sub("", cleaned)
    return cleaned


def discard_preamble(text: str) -> str:
    """Drop everything before the last recognized error banner."""

    return _PREAMBLE_RE.sub("", text, count=1)


def clean_error_text(stderr: str) -> str:
    return discard_preamble(strip_ansi(stderr))


def extract_line_number(error_text: str) -> int | None:
    """Return the 1-based line number from the first `<N>│` gutter marker.

    >>> extract_line_number("4│ main =")
    4
    >>> extract_line_number("no gutter here") is None
    True
    """

    match = _GUTTER_RE.search(error_text)
    if match is None:
        return None
    return int(match.group(1))
