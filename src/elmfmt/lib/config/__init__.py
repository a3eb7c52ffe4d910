"""Configuration discovery and parsing helpers."""

from elmfmt.lib.config._paths import CONFIG_FILE_NAME, config_path, resolve_project_root
from elmfmt.lib.config.settings import (
    ElmFormatConfig,
    ResolvedSetting,
    load_config,
    load_config_report,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ElmFormatConfig",
    "ResolvedSetting",
    "config_path",
    "load_config",
    "load_config_report",
    "resolve_project_root",
]
