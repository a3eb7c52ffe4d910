"""Config file inspection and scaffolding operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from elmfmt.lib.config._paths import config_path
from elmfmt.lib.config.settings import ResolvedSetting, load_config_report
from elmfmt.lib.ops._runtime import build_runtime
from elmfmt.lib.ops.registry import OperationSpec, operation

_CONFIG_TEMPLATE = """\
# elmfmt project config. Environment variables (ELMFMT_*) override these.

[format]
# binary = "elm-format"
# prefer_local_binary = false
# elm_version = "0.19"   # set to false to omit --elm-version
# on_save = true
# local_binary_dirs = ["node_modules/.bin"]

[notifications]
# show = false
# show_errors = true
# auto_jump_to_syntax_error = false
"""


@dataclass(frozen=True, slots=True)
class ConfigShowInput:
    file_path: str | None = None
    project_root: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigShowOutput:
    path: str
    exists: bool
    values: tuple[ResolvedSetting, ...]

    def format_text(self) -> str:
        from elmfmt.cli.format_helpers import tabular

        header = f"path: {self.path}" + ("" if self.exists else " (missing)")
        rows: list[list[str]] = []
        for item in self.values:
            source_note = item.source
            if item.env_var is not None:
                source_note = f"{source_note} ({item.env_var})"
            rows.append([item.key, _format_value_for_text(item.value), f"[{source_note}]"])
        return header + "\n" + tabular(rows)


@dataclass(frozen=True, slots=True)
class ConfigInitInput:
    project_root: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigInitOutput:
    path: str
    created: bool

    def format_text(self) -> str:
        status = "created" if self.created else "exists"
        return f"{status}: {self.path}"


def _format_value_for_text(value: object) -> str:
    if value is None:
        return "(disabled)"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, tuple):
        return ", ".join(str(item) for item in value)
    return str(value)


def config_show_sync(payload: ConfigShowInput) -> ConfigShowOutput:
    runtime = build_runtime(project_root=payload.project_root, file_path=payload.file_path)
    path = config_path(runtime.project_root)
    _, report = load_config_report(runtime.project_root)
    return ConfigShowOutput(path=path.as_posix(), exists=path.is_file(), values=report)


def config_init_sync(payload: ConfigInitInput) -> ConfigInitOutput:
    runtime = build_runtime(project_root=payload.project_root)
    path = config_path(runtime.project_root)
    if path.exists():
        return ConfigInitOutput(path=path.as_posix(), created=False)
    path.write_text(_CONFIG_TEMPLATE, encoding="utf-8")
    return ConfigInitOutput(path=path.as_posix(), created=True)


async def config_show(payload: ConfigShowInput) -> ConfigShowOutput:
    return await asyncio.to_thread(config_show_sync, payload)


async def config_init(payload: ConfigInitInput) -> ConfigInitOutput:
    return await asyncio.to_thread(config_init_sync, payload)


operation(
    OperationSpec[ConfigShowInput, ConfigShowOutput](
        name="config.show",
        handler=config_show,
        sync_handler=config_show_sync,
        input_type=ConfigShowInput,
        output_type=ConfigShowOutput,
        cli_group="config",
        cli_name="show",
        mcp_name="config_show",
        description="Show resolved config values with source annotations.",
    )
)

operation(
    OperationSpec[ConfigInitInput, ConfigInitOutput](
        name="config.init",
        handler=config_init,
        sync_handler=config_init_sync,
        input_type=ConfigInitInput,
        output_type=ConfigInitOutput,
        cli_group="config",
        cli_name="init",
        mcp_name="config_init",
        description="Scaffold elmfmt.toml with commented defaults.",
        cli_only=True,
    )
)
