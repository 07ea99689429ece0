from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from cantor.invariants import CheckedModeConfig
from cantor.uint import MAX_BITS

DEFAULT_CONFIG_NAME = "cantor.toml"

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def _section(data: TomlTable, name: str) -> TomlTable:
    section = data.get(name, {})
    return section if isinstance(section, dict) else {}


def invariants_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "invariants")


def cli_defaults(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    return _section(load_config(root=root, config_path=config_path), "cli")


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def checked_mode_config(section: TomlTable | None) -> CheckedModeConfig:
    if not isinstance(section, dict):
        return CheckedModeConfig()
    return CheckedModeConfig(enabled=_as_bool(section.get("checked")))


def output_format(section: TomlTable | None, default: str = "table") -> str:
    if not isinstance(section, dict):
        return default
    value = section.get("format")
    if isinstance(value, str) and value.strip().lower() in OUTPUT_FORMATS:
        return value.strip().lower()
    return default


def max_bits(section: TomlTable | None, default: int = MAX_BITS) -> int:
    if not isinstance(section, dict):
        return default
    value = section.get("max_bits")
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return min(max(value, 0), MAX_BITS)
