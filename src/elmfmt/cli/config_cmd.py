"""CLI command handlers for config.* operations."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Annotated, Any

from cyclopts import Parameter

from elmfmt.lib.ops.config import (
    ConfigInitInput,
    ConfigShowInput,
    config_init_sync,
    config_show_sync,
)
from elmfmt.lib.ops.registry import get_all_operations

if TYPE_CHECKING:
    from cyclopts import App

Emitter = Callable[[Any], None]


def _config_show(
    emit: Emitter,
    file_path: Annotated[
        str | None,
        Parameter(name="--file", help="Elm file whose project config should be shown."),
    ] = None,
) -> None:
    emit(config_show_sync(ConfigShowInput(file_path=file_path)))


def _config_init(emit: Emitter) -> None:
    emit(config_init_sync(ConfigInitInput()))


def register_config_commands(app: App, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "config.show": lambda: partial(_config_show, emit),
        "config.init": lambda: partial(_config_init, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_all_operations():
        if op.cli_group != "config":
            continue
        handler_factory = handlers.get(op.name)
        if handler_factory is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        handler = handler_factory()
        handler.__name__ = f"cmd_{op.cli_group}_{op.cli_name}"
        app.command(handler, name=op.cli_name, help=op.description)
        registered.add(op.name)
        descriptions[op.name] = op.description

    return registered, descriptions
