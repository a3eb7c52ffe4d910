"""Routing of format outcomes to editor host callbacks."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from elmfmt.lib.domain import (
    BinaryUnavailable,
    FormatFailure,
    Formatted,
    FormatOutcome,
    FormatSyntaxError,
    InvocationFailure,
    JumpAction,
    UnexpectedExit,
)
from elmfmt.lib.exec.invoke import format_source

if TYPE_CHECKING:
    from elmfmt.lib.config.settings import ElmFormatConfig
    from elmfmt.lib.exec.binary import LocalBinaryResolver

ELM_EXTENSION = ".elm"
SUCCESS_MESSAGE = "File Formatted"
INSTALL_INSTRUCTIONS = (
    "Install elm-format with `npm install -g elm-format`, or see "
    "https://github.com/avh4/elm-format#installation- for other options."
)


class HostCallbacks(Protocol):
    """Editor-side hooks that receive the result of one format request."""

    def replace_text(self, new_text: str) -> None: ...

    def goto_line(self, line_number: int) -> None: ...

    def notify_success(self, message: str) -> None: ...

    def notify_info(self, message: str, *, detail: str | None = None) -> None: ...

    def notify_error(
        self,
        message: str,
        *,
        detail: str | None = None,
        jump: JumpAction | None = None,
    ) -> None: ...


def is_elm_file(path: Path | str | None) -> bool:
    if not path:
        return False
    return Path(path).suffix == ELM_EXTENSION


def should_format_on_save(path: Path | str | None, config: ElmFormatConfig) -> bool:
    return config.format_on_save and is_elm_file(path)


def error_message(outcome: FormatFailure) -> str:
    """User-facing error text for a failed outcome."""

    if isinstance(outcome, FormatSyntaxError):
        return f"Elm Format Failed\n\n{outcome.raw_message}"
    if isinstance(outcome, BinaryUnavailable):
        if outcome.executable_exists:
            return "Can't execute the elm-format binary, is it executable?"
        return "Can't find the elm-format binary, check the elmfmt settings"
    if isinstance(outcome, UnexpectedExit):
        return f"elm-format exited with code {outcome.exit_code}."
    if isinstance(outcome, InvocationFailure):
        return f"elm-format exception: {outcome.message}"
    raise TypeError(f"Unsupported format outcome: {outcome!r}")


def dispatch_outcome(
    outcome: FormatOutcome,
    config: ElmFormatConfig,
    host: HostCallbacks,
) -> None:
    """Apply one outcome to the host, honoring notification and jump settings."""

    if isinstance(outcome, Formatted):
        host.replace_text(outcome.new_text)
        if config.show_notifications:
            host.notify_success(SUCCESS_MESSAGE)
        return

    jump: JumpAction | None = None
    if isinstance(outcome, FormatSyntaxError) and outcome.line_number is not None:
        if config.auto_jump_to_syntax_error:
            host.goto_line(outcome.line_number)
        else:
            jump = outcome.jump

    if not config.show_error_notifications:
        return

    message = error_message(outcome)
    detail = INSTALL_INSTRUCTIONS if isinstance(outcome, BinaryUnavailable) else None
    host.notify_error(message, detail=detail, jump=jump)


def format_for_host(
    source_text: str,
    path: Path | str | None,
    config: ElmFormatConfig,
    host: HostCallbacks,
    *,
    resolver: LocalBinaryResolver | None = None,
) -> FormatOutcome | None:
    """Manual "format this file" command. Returns None for non-Elm files."""

    if not is_elm_file(path):
        host.notify_info(
            "Not an Elm file",
            detail="I only know how to format .elm-files, sorry!",
        )
        return None

    file_path = Path(path) if path else None
    outcome = format_source(source_text, config, file_path=file_path, resolver=resolver)
    dispatch_outcome(outcome, config, host)
    return outcome


def format_on_save(
    source_text: str,
    path: Path | str | None,
    config: ElmFormatConfig,
    host: HostCallbacks,
    *,
    resolver: LocalBinaryResolver | None = None,
) -> FormatOutcome | None:
    """Will-save hook. Returns None when format-on-save does not apply."""

    if not should_format_on_save(path, config):
        return None
    file_path = Path(path) if path else None
    outcome = format_source(source_text, config, file_path=file_path, resolver=resolver)
    dispatch_outcome(outcome, config, host)
    return outcome
