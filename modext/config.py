"""Configuration loading for modext (.modext.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .fixup.reconcile import DEFAULT_FIX_COMMAND

CONFIG_FILE_NAME = ".modext.yml"
OUTPUT_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ModextConfig:
    """Represents the settings defined in .modext.yml."""

    root: Path
    fix_command: str = DEFAULT_FIX_COMMAND
    fail_on_fixup: bool = False
    output_format: str = "text"


def load_config(config_path: Path) -> ModextConfig:
    """Load configuration from a file or from ``.modext.yml`` inside a directory."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ModextConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    config = ModextConfig(root=root)
    fix_command = _as_str(data.get("fix_command"))
    if fix_command:
        config.fix_command = fix_command
    fail_on_fixup = as_bool(data.get("fail_on_fixup"))
    if fail_on_fixup is not None:
        config.fail_on_fixup = fail_on_fixup
    output_format = _as_str(data.get("output_format"))
    if output_format is not None:
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}, got '{output_format}'"
            )
        config.output_format = output_format
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = ["CONFIG_FILE_NAME", "ConfigError", "ModextConfig", "as_bool", "load_config"]
