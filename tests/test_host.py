"""Routing outcomes to editor host callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from elmfmt.lib import host as host_module
from elmfmt.lib.config.settings import ElmFormatConfig
from elmfmt.lib.domain import (
    BinaryUnavailable,
    Formatted,
    FormatSyntaxError,
    InvocationFailure,
    JumpAction,
    UnexpectedExit,
)
from elmfmt.lib.host import (
    INSTALL_INSTRUCTIONS,
    dispatch_outcome,
    error_message,
    format_for_host,
    format_on_save,
    is_elm_file,
    should_format_on_save,
)


@dataclass
class RecordingHost:
    events: list[tuple[str, Any]] = field(default_factory=list)

    def replace_text(self, new_text: str) -> None:
        self.events.append(("replace_text", new_text))

    def goto_line(self, line_number: int) -> None:
        self.events.append(("goto_line", line_number))

    def notify_success(self, message: str) -> None:
        self.events.append(("success", message))

    def notify_info(self, message: str, *, detail: str | None = None) -> None:
        self.events.append(("info", (message, detail)))

    def notify_error(
        self,
        message: str,
        *,
        detail: str | None = None,
        jump: JumpAction | None = None,
    ) -> None:
        self.events.append(("error", (message, detail, jump)))


def test_formatted_replaces_text_quietly_by_default() -> None:
    host = RecordingHost()

    dispatch_outcome(Formatted(new_text="x = 1\n"), ElmFormatConfig(), host)

    assert host.events == [("replace_text", "x = 1\n")]


def test_formatted_notifies_when_enabled() -> None:
    host = RecordingHost()

    dispatch_outcome(
        Formatted(new_text="x = 1\n"),
        ElmFormatConfig(show_notifications=True),
        host,
    )

    assert host.events == [("replace_text", "x = 1\n"), ("success", "File Formatted")]


def test_syntax_error_offers_jump_action() -> None:
    host = RecordingHost()

    dispatch_outcome(
        FormatSyntaxError(raw_message="3│ bad", line_number=3),
        ElmFormatConfig(),
        host,
    )

    assert host.events == [
        ("error", ("Elm Format Failed\n\n3│ bad", None, JumpAction(line_number=3))),
    ]


def test_syntax_error_auto_jumps_when_configured() -> None:
    host = RecordingHost()

    dispatch_outcome(
        FormatSyntaxError(raw_message="3│ bad", line_number=3),
        ElmFormatConfig(auto_jump_to_syntax_error=True),
        host,
    )

    assert host.events == [
        ("goto_line", 3),
        ("error", ("Elm Format Failed\n\n3│ bad", None, None)),
    ]


def test_syntax_error_without_line_has_no_jump() -> None:
    host = RecordingHost()

    dispatch_outcome(
        FormatSyntaxError(raw_message="bad", line_number=None),
        ElmFormatConfig(auto_jump_to_syntax_error=True),
        host,
    )

    assert host.events == [("error", ("Elm Format Failed\n\nbad", None, None))]


@pytest.mark.parametrize(
    "outcome,message,detail",
    [
        pytest.param(
            BinaryUnavailable(path="/x/elm-format", executable_exists=True),
            "Can't execute the elm-format binary, is it executable?",
            INSTALL_INSTRUCTIONS,
            id="not-executable",
        ),
        pytest.param(
            BinaryUnavailable(path="elm-format", executable_exists=False),
            "Can't find the elm-format binary, check the elmfmt settings",
            INSTALL_INSTRUCTIONS,
            id="not-found",
        ),
        pytest.param(
            UnexpectedExit(exit_code=2),
            "elm-format exited with code 2.",
            None,
            id="unexpected-exit",
        ),
        pytest.param(
            InvocationFailure(message="boom"),
            "elm-format exception: boom",
            None,
            id="invocation-failure",
        ),
    ],
)
def test_error_messages(outcome: Any, message: str, detail: str | None) -> None:
    host = RecordingHost()

    dispatch_outcome(outcome, ElmFormatConfig(), host)

    assert host.events == [("error", (message, detail, None))]


def test_error_message_is_only_for_failures() -> None:
    assert error_message(UnexpectedExit(exit_code=-9)) == "elm-format exited with code -9."
    with pytest.raises(TypeError, match="Unsupported format outcome"):
        error_message(Formatted(new_text="x"))  # type: ignore[arg-type]


def test_error_notifications_can_be_disabled() -> None:
    host = RecordingHost()
    config = ElmFormatConfig(show_error_notifications=False)

    dispatch_outcome(UnexpectedExit(exit_code=2), config, host)
    dispatch_outcome(FormatSyntaxError(raw_message="3│", line_number=3), config, host)

    assert host.events == []


def test_disabled_notifications_still_auto_jump() -> None:
    host = RecordingHost()
    config = ElmFormatConfig(show_error_notifications=False, auto_jump_to_syntax_error=True)

    dispatch_outcome(FormatSyntaxError(raw_message="9│", line_number=9), config, host)

    assert host.events == [("goto_line", 9)]


@pytest.mark.parametrize(
    "path,expected",
    [
        ("src/Main.elm", True),
        (Path("/abs/Page.elm"), True),
        ("src/main.js", False),
        ("Makefile", False),
        ("", False),
        (None, False),
    ],
)
def test_is_elm_file(path: Path | str | None, expected: bool) -> None:
    assert is_elm_file(path) is expected


def test_should_format_on_save_respects_setting() -> None:
    assert should_format_on_save("Main.elm", ElmFormatConfig()) is True
    assert should_format_on_save("Main.elm", ElmFormatConfig(format_on_save=False)) is False
    assert should_format_on_save("main.js", ElmFormatConfig()) is False


def test_format_for_host_rejects_non_elm_files(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(*args: object, **kwargs: object) -> None:
        raise AssertionError("formatter must not run")

    monkeypatch.setattr(host_module, "format_source", _unexpected)
    host = RecordingHost()

    assert format_for_host("x", "notes.txt", ElmFormatConfig(), host) is None
    assert host.events == [
        ("info", ("Not an Elm file", "I only know how to format .elm-files, sorry!")),
    ]


def test_format_for_host_runs_and_dispatches(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def _fake_format_source(source_text: str, config: ElmFormatConfig, **kwargs: Any) -> Formatted:
        seen["source"] = source_text
        seen["file_path"] = kwargs["file_path"]
        return Formatted(new_text="formatted\n")

    monkeypatch.setattr(host_module, "format_source", _fake_format_source)
    host = RecordingHost()

    outcome = format_for_host("raw", "src/Main.elm", ElmFormatConfig(), host)

    assert outcome == Formatted(new_text="formatted\n")
    assert seen == {"source": "raw", "file_path": Path("src/Main.elm")}
    assert host.events == [("replace_text", "formatted\n")]


def test_format_on_save_skips_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(*args: object, **kwargs: object) -> None:
        raise AssertionError("formatter must not run")

    monkeypatch.setattr(host_module, "format_source", _unexpected)
    host = RecordingHost()

    assert format_on_save("x", "Main.elm", ElmFormatConfig(format_on_save=False), host) is None
    assert host.events == []
