"""Project-level formatter config loader."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Literal, cast

from elmfmt.lib.config._paths import config_path

logger = logging.getLogger(__name__)

ConfigSource = Literal["builtin", "file", "env var"]
ValueKind = Literal["str", "bool", "version", "str_list"]


@dataclass(frozen=True, slots=True)
class ElmFormatConfig:
    """Resolved formatter configuration, validated once at load time."""

    binary: str = "elm-format"
    prefer_local_binary: bool = False
    # None disables the `--elm-version` flag.
    elm_version: str | None = "0.19"
    format_on_save: bool = True
    show_notifications: bool = False
    show_error_notifications: bool = True
    auto_jump_to_syntax_error: bool = False
    local_binary_dirs: tuple[str, ...] = ("node_modules/.bin",)


@dataclass(frozen=True, slots=True)
class ResolvedSetting:
    """One config value annotated with where it came from."""

    key: str
    value: object
    source: ConfigSource
    env_var: str | None = None


_VALUE_KINDS: dict[str, ValueKind] = {
    "binary": "str",
    "prefer_local_binary": "bool",
    "elm_version": "version",
    "format_on_save": "bool",
    "show_notifications": "bool",
    "show_error_notifications": "bool",
    "auto_jump_to_syntax_error": "bool",
    "local_binary_dirs": "str_list",
}

_SECTION_KEY_MAP: dict[str, dict[str, str]] = {
    "format": {
        "binary": "binary",
        "prefer_local_binary": "prefer_local_binary",
        "elm_version": "elm_version",
        "on_save": "format_on_save",
        "format_on_save": "format_on_save",
        "local_binary_dirs": "local_binary_dirs",
    },
    "notifications": {
        "show": "show_notifications",
        "show_notifications": "show_notifications",
        "show_errors": "show_error_notifications",
        "show_error_notifications": "show_error_notifications",
        "auto_jump_to_syntax_error": "auto_jump_to_syntax_error",
    },
}

# Top-level keys also accept the camelCase names used by editor settings panes.
_TOP_LEVEL_KEY_MAP: dict[str, str] = {
    **{name: name for name in _VALUE_KINDS},
    "preferLocalBinary": "prefer_local_binary",
    "elmVersion": "elm_version",
    "formatOnSave": "format_on_save",
    "showNotifications": "show_notifications",
    "showErrorNotifications": "show_error_notifications",
    "autoJumpToSyntaxError": "auto_jump_to_syntax_error",
}

ENV_OVERRIDE_MAP: dict[str, str] = {
    "ELMFMT_BINARY": "binary",
    "ELMFMT_PREFER_LOCAL_BINARY": "prefer_local_binary",
    "ELMFMT_ELM_VERSION": "elm_version",
    "ELMFMT_FORMAT_ON_SAVE": "format_on_save",
    "ELMFMT_SHOW_NOTIFICATIONS": "show_notifications",
    "ELMFMT_SHOW_ERROR_NOTIFICATIONS": "show_error_notifications",
    "ELMFMT_AUTO_JUMP_TO_SYNTAX_ERROR": "auto_jump_to_syntax_error",
}

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})
_DISABLED_VERSION_WORDS = frozenset({"", "false", "off", "none"})


def _type_error(source: str, expected: str, raw_value: object) -> ValueError:
    return ValueError(
        f"Invalid value for '{source}': expected {expected}, got "
        f"{type(raw_value).__name__} ({raw_value!r})."
    )


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    kind = _VALUE_KINDS[field_name]
    if kind == "bool":
        if not isinstance(raw_value, bool):
            raise _type_error(source, "bool", raw_value)
        return raw_value

    if kind == "version":
        if raw_value is False:
            return None
        if isinstance(raw_value, int | float) and not isinstance(raw_value, bool):
            # Unquoted `elm_version = 0.19` parses as a float.
            return str(raw_value)
        if not isinstance(raw_value, str):
            raise _type_error(source, "str or false", raw_value)
        normalized = raw_value.strip()
        return normalized or None

    if kind == "str_list":
        if not isinstance(raw_value, list):
            raise _type_error(source, "array[str]", raw_value)
        parsed: list[str] = []
        for item in cast("list[object]", raw_value):
            if not isinstance(item, str):
                raise _type_error(source, "array[str]", item)
            normalized = item.strip()
            if not normalized:
                raise ValueError(f"Invalid value for '{source}': expected non-empty entries.")
            parsed.append(normalized)
        return tuple(parsed)

    if not isinstance(raw_value, str):
        raise _type_error(source, "str", raw_value)
    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    return normalized


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    kind = _VALUE_KINDS[field_name]
    normalized = raw_value.strip()
    if kind == "bool":
        lowered = normalized.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueError(
            f"Invalid environment override '{env_name}': expected bool, got {raw_value!r}."
        )

    if kind == "version":
        if normalized.lower() in _DISABLED_VERSION_WORDS:
            return None
        return normalized

    if not normalized:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected non-empty string."
        )
    return normalized


def _default_values() -> dict[str, object]:
    defaults = ElmFormatConfig()
    return {item.name: getattr(defaults, item.name) for item in fields(ElmFormatConfig)}


def _read_file_payload(path: Path) -> dict[str, object]:
    if not path.is_file():
        return {}
    try:
        payload_obj = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as error:
        raise ValueError(f"Invalid TOML in '{path}': {error}") from error
    return cast("dict[str, object]", payload_obj)


def _apply_toml_payload(
    *,
    values: dict[str, object],
    sources: dict[str, ConfigSource],
    payload: dict[str, object],
    path: Path,
) -> None:
    for key, raw_value in payload.items():
        section_map = _SECTION_KEY_MAP.get(key)
        if section_map is not None:
            if not isinstance(raw_value, dict):
                raise ValueError(f"Invalid value for '{key}' in '{path}': expected table.")
            for section_key, section_value in cast("dict[str, object]", raw_value).items():
                field_name = section_map.get(section_key)
                if field_name is None:
                    logger.warning(
                        "Ignoring unknown elmfmt config key '%s.%s'.",
                        key,
                        section_key,
                    )
                    continue
                values[field_name] = _coerce_file_value(
                    field_name=field_name,
                    raw_value=section_value,
                    source=f"{key}.{section_key}",
                )
                sources[field_name] = "file"
            continue

        field_name = _TOP_LEVEL_KEY_MAP.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown elmfmt config key '%s'.", key)
            continue
        values[field_name] = _coerce_file_value(
            field_name=field_name,
            raw_value=raw_value,
            source=key,
        )
        sources[field_name] = "file"


def _apply_env_overrides(
    values: dict[str, object],
    sources: dict[str, ConfigSource],
    env_vars: dict[str, str],
) -> None:
    for env_name, field_name in ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )
        sources[field_name] = "env var"
        env_vars[field_name] = env_name


def _build_config(values: dict[str, object]) -> ElmFormatConfig:
    return ElmFormatConfig(
        binary=cast("str", values["binary"]),
        prefer_local_binary=cast("bool", values["prefer_local_binary"]),
        elm_version=cast("str | None", values["elm_version"]),
        format_on_save=cast("bool", values["format_on_save"]),
        show_notifications=cast("bool", values["show_notifications"]),
        show_error_notifications=cast("bool", values["show_error_notifications"]),
        auto_jump_to_syntax_error=cast("bool", values["auto_jump_to_syntax_error"]),
        local_binary_dirs=cast("tuple[str, ...]", values["local_binary_dirs"]),
    )


def load_config_report(
    project_root: Path,
) -> tuple[ElmFormatConfig, tuple[ResolvedSetting, ...]]:
    """Load config and annotate every field with its winning source."""

    values = _default_values()
    sources: dict[str, ConfigSource] = dict.fromkeys(values, "builtin")
    env_vars: dict[str, str] = {}

    path = config_path(project_root)
    payload = _read_file_payload(path)
    if payload:
        _apply_toml_payload(values=values, sources=sources, payload=payload, path=path)
    _apply_env_overrides(values, sources, env_vars)

    config = _build_config(values)
    report = tuple(
        ResolvedSetting(
            key=name,
            value=getattr(config, name),
            source=sources[name],
            env_var=env_vars.get(name),
        )
        for name in values
    )
    return config, report


def load_config(project_root: Path) -> ElmFormatConfig:
    """Load `elmfmt.toml` and apply environment overrides."""

    config, _ = load_config_report(project_root)
    return config
