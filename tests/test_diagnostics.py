"""Error-text cleanup and gutter line-number extraction."""

from __future__ import annotations

import pytest

from elmfmt.lib.exec.diagnostics import (
    clean_error_text,
    discard_preamble,
    extract_line_number,
    strip_ansi,
)

ELM_FORMAT_ERROR = (
    "Processing file src/Main.elm\n"
    "\x1b[36m-- SYNTAX PROBLEM --------------------------------------------------- src/Main.elm\x1b[0m\n"
    "\n"
    "I ran into something unexpected when parsing your code!\n"
    "\n"
    "\x1b[34m4│\x1b[0m main =\n"
    "\x1b[34m5│\x1b[0m     text \"hi\n"
    "              \x1b[31m^\x1b[0m\n"
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        pytest.param("\x1b[31m3│ bad code\x1b[0m", "3│ bad code", id="sgr"),
        pytest.param("\x1b[1;31mbold red\x1b[0m", "bold red", id="compound-sgr"),
        pytest.param("[31mno escape byte[0m", "no escape byte", id="bare-bracket"),
        pytest.param("\x1b[2Kcleared", "cleared", id="csi-erase"),
        pytest.param("plain text", "plain text", id="plain"),
    ],
)
def test_strip_ansi_removes_escape_sequences(raw: str, expected: str) -> None:
    assert strip_ansi(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "\x1b[31m3│ bad code\x1b[0m",
        "\x1b\x1b[31m[0m",
        "\x1b[[31m0m",
        "[3[31m1m",
        ELM_FORMAT_ERROR,
        "",
    ],
)
def test_strip_ansi_is_idempotent(raw: str) -> None:
    once = strip_ansi(raw)
    assert strip_ansi(once) == once
    assert "\x1b[" not in once


@pytest.mark.parametrize(
    "text,expected",
    [
        pytest.param("3│ bad code", 3, id="single"),
        pytest.param("12│ x\n13│ y", 12, id="first-wins"),
        pytest.param("line 4│", 4, id="no-trailing-space"),
        pytest.param("   107│     view model =", 107, id="indented"),
        pytest.param("no gutter here", None, id="absent"),
        pytest.param("│ only a bar", None, id="bar-without-digits"),
        pytest.param("3 | ascii pipe", None, id="ascii-pipe"),
    ],
)
def test_extract_line_number(text: str, expected: int | None) -> None:
    assert extract_line_number(text) == expected


def test_discard_preamble_keeps_text_from_last_banner() -> None:
    text = "Processing file a.elm\nI ran into something unexpected when parsing your code!\n4│ x"

    assert discard_preamble(text) == (
        "I ran into something unexpected when parsing your code!\n4│ x"
    )


def test_discard_preamble_is_case_insensitive() -> None:
    text = "noise\ni RAN INTO something unexpected WHEN parsing your code!\n1│"

    assert discard_preamble(text).startswith("i RAN INTO")


def test_discard_preamble_without_banner_is_identity() -> None:
    assert discard_preamble("4│ main =") == "4│ main ="


def test_clean_error_text_real_report() -> None:
    cleaned = clean_error_text(ELM_FORMAT_ERROR)

    assert "\x1b" not in cleaned
    assert not cleaned.startswith("Processing file")
    assert cleaned.startswith("I ran into something unexpected")
    assert extract_line_number(cleaned) == 4
