"""Unit tests for YAML layout configuration."""

from pathlib import Path

import pytest

from sheetstand.config import LayoutConfig, LayoutConfigError, load_config


def test_packaged_defaults(tmp_path: Path) -> None:
    cfg = load_config(user_path=tmp_path / "missing.yaml")
    layout = LayoutConfig.from_mapping(cfg)
    assert layout == LayoutConfig(max_chars_per_line=45, lines_per_page=6)
    assert cfg["theme"]["accent"]


def test_user_overrides_are_deep_merged(tmp_path: Path) -> None:
    user = tmp_path / "config.yaml"
    user.write_text("music_stand:\n  music_sheet:\n    lines_per_page: 3\n", encoding="utf-8")
    layout = LayoutConfig.from_mapping(load_config(user_path=user))
    assert layout.lines_per_page == 3
    assert layout.max_chars_per_line == 45


def test_empty_files_fall_back_to_builtin_defaults(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    cfg = load_config(user_path=empty, default_path=empty)
    assert LayoutConfig.from_mapping(cfg) == LayoutConfig()


def test_malformed_yaml_raises(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("music_stand: [unclosed\n", encoding="utf-8")
    with pytest.raises(LayoutConfigError):
        load_config(user_path=bad)


def test_non_mapping_yaml_raises(tmp_path: Path) -> None:
    bad = tmp_path / "list.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(LayoutConfigError):
        load_config(user_path=bad)


@pytest.mark.parametrize(
    "body",
    ["music_stand:\n", "music_stand: 3\n", "music_stand:\n  music_sheet: 5\n", "music_stand:\n  music_sheet:\n"],
)
def test_non_mapping_sections_raise(tmp_path: Path, body: str) -> None:
    bad = tmp_path / "sections.yaml"
    bad.write_text(body, encoding="utf-8")
    with pytest.raises(LayoutConfigError, match="must be a mapping"):
        load_config(user_path=bad)


def test_from_mapping_rejects_non_mapping_section() -> None:
    with pytest.raises(LayoutConfigError):
        LayoutConfig.from_mapping({"music_stand": {"music_sheet": None}})


@pytest.mark.parametrize(
    ("max_chars", "lines"),
    [(0, 6), (45, 0), (-1, 6), (45, -2), ("45", 6), (45, 2.5), (True, 6)],
)
def test_layout_config_rejects_invalid_values(max_chars: object, lines: object) -> None:
    with pytest.raises(LayoutConfigError):
        LayoutConfig(max_chars_per_line=max_chars, lines_per_page=lines)  # type: ignore[arg-type]


def test_layout_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        LayoutConfig(max_chars_per_line=0)


def test_layout_config_error_is_shared_with_layout_pipeline() -> None:
    from sheetstand import errors, layout

    assert LayoutConfigError is errors.LayoutConfigError
    assert layout.LayoutConfigError is errors.LayoutConfigError
    assert LayoutConfigError.__module__ == "sheetstand.errors"
