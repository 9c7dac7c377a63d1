"""Vault settings loaded from ``zettel.toml``.

Example::

    main_box_path = "MainBox"
    id_property = "alias"
    canvas_path = "Canvas"
    enable_generation_assist = true

    [layout]
    level_width = 720
    node_width = 480
    node_height = 300
    min_vertical_gap = 55
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .errors import ConfigError
from .tree.layout import LayoutParams

CONFIG_FILENAME = "zettel.toml"


@dataclass(frozen=True)
class Settings:
    """Per-vault settings."""

    main_box_path: str = "MainBox"
    id_property: str = "alias"
    canvas_path: str = "Canvas"
    enable_generation_assist: bool = True
    layout: LayoutParams = field(default_factory=LayoutParams)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _string(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string")
    return value.strip()


def _non_negative(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"layout.{key} must be a non-negative number")
    return value


def parse_settings(data: dict[str, Any]) -> Settings:
    """Validate a decoded config table into Settings."""
    defaults = Settings()

    assist = data.get("enable_generation_assist", defaults.enable_generation_assist)
    if not isinstance(assist, bool):
        raise ConfigError("enable_generation_assist must be true or false")

    layout_raw = _coerce_dict(data.get("layout"))
    base = defaults.layout
    layout = LayoutParams(
        level_width=_non_negative(layout_raw, "level_width", base.level_width),
        node_width=_non_negative(layout_raw, "node_width", base.node_width),
        node_height=_non_negative(layout_raw, "node_height", base.node_height),
        min_vertical_gap=_non_negative(layout_raw, "min_vertical_gap", base.min_vertical_gap),
    )

    return Settings(
        main_box_path=_string(data, "main_box_path", defaults.main_box_path),
        id_property=_string(data, "id_property", defaults.id_property),
        canvas_path=_string(data, "canvas_path", defaults.canvas_path),
        enable_generation_assist=assist,
        layout=layout,
    )


def load_settings(vault_path: Path) -> Settings:
    """Load settings for a vault; defaults when no zettel.toml exists.

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    path = vault_path / CONFIG_FILENAME
    if not path.exists():
        return Settings()

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except Exception as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

    return parse_settings(data)


def find_vault_root(start: Path) -> Path | None:
    """Walk up from ``start`` to the first folder holding zettel.toml or .obsidian."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / CONFIG_FILENAME).is_file() or (p / ".obsidian").is_dir():
            return p
    return None
