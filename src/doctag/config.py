from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

from doctag.doc_blocks import DEFAULT_MARKER
from doctag.validator import DEFAULT_TAG

DEFAULT_CONFIG_NAME = "doctag.toml"
DEFAULT_INCLUDE = ("src/*/java/**/*.java",)
DEFAULT_EXCLUDE = ("build/**",)

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class CheckSettings:
    tag: str = DEFAULT_TAG
    marker: str = DEFAULT_MARKER
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    forbid_wildcard_imports: bool = True


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
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


def doctag_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("doctag", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_bool(value: TomlValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def _as_text(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _pattern_list(value: TomlValue, default: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(_normalize_name_list(value))
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(_normalize_name_list(value))
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def check_settings(section: TomlTable | None) -> CheckSettings:
    if section is None or not isinstance(section, dict):
        return CheckSettings()
    include = _normalize_name_list(section.get("include"))
    return CheckSettings(
        tag=_as_text(section.get("tag"), DEFAULT_TAG),
        marker=_as_text(section.get("marker"), DEFAULT_MARKER),
        include=tuple(include) if include else DEFAULT_INCLUDE,
        exclude=_pattern_list(section.get("exclude"), DEFAULT_EXCLUDE),
        forbid_wildcard_imports=_as_bool(section.get("forbid_wildcard_imports"), True),
    )
