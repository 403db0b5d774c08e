"""Layout configuration: packaged YAML defaults merged with per-user overrides."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from sheetstand.errors import LayoutConfigError

logger = logging.getLogger(__name__)

PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "sheetstand" / "config.yaml"

DEFAULT_MAX_CHARS_PER_LINE = 45
DEFAULT_LINES_PER_PAGE = 6


def _safe_load(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise LayoutConfigError(f"Could not parse config file '{path}': {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise LayoutConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return data


def _section(parent: Mapping[str, Any], dotted: str) -> Any:
    section = parent.get(dotted.rsplit(".", 1)[-1], {})
    if not isinstance(section, Mapping):
        raise LayoutConfigError(f"Config section '{dotted}' must be a mapping, got {section!r}.")
    return section


def _deep_merge(a: Mapping[str, Any], b: Mapping[str, Any]) -> dict[str, Any]:
    out = copy.deepcopy(dict(a))
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_config(
    user_path: Path | str | None = None,
    default_path: Path | str | None = None,
) -> dict[str, Any]:
    """
    Load the packaged defaults and deep-merge the user overrides on top.

    A missing user file is not an error; a malformed one raises
    ``LayoutConfigError``.
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    cfg = _deep_merge(_safe_load(dpath), _safe_load(upath))
    logger.debug("Loaded config (defaults=%s, user=%s)", dpath, upath)

    stand_cfg = cfg.setdefault("music_stand", _section(cfg, "music_stand"))
    sheet_cfg = stand_cfg.setdefault("music_sheet", _section(stand_cfg, "music_stand.music_sheet"))
    sheet_cfg.setdefault("max_chars_per_line", DEFAULT_MAX_CHARS_PER_LINE)
    sheet_cfg.setdefault("lines_per_page", DEFAULT_LINES_PER_PAGE)
    return cfg


def _require_positive_int(name: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise LayoutConfigError(f"{name} must be a positive integer, got {value!r}.")
    if value <= 0:
        raise LayoutConfigError(f"{name} must be a positive integer, got {value}.")
    return value


@dataclass(frozen=True)
class LayoutConfig:
    """Line width budget (characters) and page height (lines) for the music stand."""

    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE
    lines_per_page: int = DEFAULT_LINES_PER_PAGE

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        _require_positive_int("max_chars_per_line", self.max_chars_per_line)
        _require_positive_int("lines_per_page", self.lines_per_page)

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> LayoutConfig:
        """Build from a merged config dict as returned by ``load_config``."""
        sheet_cfg = _section(_section(cfg, "music_stand"), "music_stand.music_sheet")
        return cls(
            max_chars_per_line=sheet_cfg.get("max_chars_per_line", DEFAULT_MAX_CHARS_PER_LINE),
            lines_per_page=sheet_cfg.get("lines_per_page", DEFAULT_LINES_PER_PAGE),
        )

    @classmethod
    def load(cls, user_path: Path | str | None = None) -> LayoutConfig:
        return cls.from_mapping(load_config(user_path))
