"""sheetstand CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from sheetstand import __version__, transport
from sheetstand.config import LayoutConfig, LayoutConfigError, load_config
from sheetstand.layout import line_length, line_text
from sheetstand.music_stand import MusicStand
from sheetstand.notation_parser import build_sheet, parse_vp_notation
from sheetstand.sheet_models import PlaybackState
from sheetstand.sheet_renderers import SheetTheme


def _resolve_layout(
    config_path: str | None,
    max_chars: int | None,
    lines_per_page: int | None,
) -> tuple[LayoutConfig, dict]:
    """Load the YAML config and apply command-line overrides on top."""
    cfg = load_config(config_path)
    sheet_cfg = cfg["music_stand"]["music_sheet"]
    if max_chars is not None:
        sheet_cfg["max_chars_per_line"] = max_chars
    if lines_per_page is not None:
        sheet_cfg["lines_per_page"] = lines_per_page
    return LayoutConfig.from_mapping(cfg), cfg


def _fail(message: str) -> None:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="sheetstand")
@click.option("--verbose", "-v", is_flag=True, help="Log layout and parser details to stderr.")
def main(verbose: bool) -> None:
    """sheetstand — music stand layout and playback cursor for Virtual Piano sheets."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


_layout_options = [
    click.option(
        "--max-chars",
        type=int,
        default=None,
        metavar="N",
        help="Characters per line. Defaults to the config value (45).",
    ),
    click.option(
        "--lines-per-page",
        type=int,
        default=None,
        metavar="N",
        help="Lines per page. Defaults to the config value (6).",
    ),
    click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False),
        default=None,
        metavar="PATH",
        help="YAML config overriding the packaged defaults.",
    ),
]


def layout_options(func):
    for option in reversed(_layout_options):
        func = option(func)
    return func


# ── layout subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("notation_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@layout_options
def layout(
    notation_file: str,
    max_chars: int | None,
    lines_per_page: int | None,
    config_path: str | None,
) -> None:
    """
    Show how a notation file breaks into lines and pages.

    NOTATION_FILE is a text file in Virtual Piano notation.

    \b
    Examples:
      sheetstand layout song.txt
      sheetstand layout song.txt --max-chars 30 --lines-per-page 4
    """
    try:
        layout_config, _ = _resolve_layout(config_path, max_chars, lines_per_page)
    except LayoutConfigError as exc:
        _fail(str(exc))

    notation = Path(notation_file).read_text(encoding="utf-8")
    parsed = parse_vp_notation(notation)
    for warning in parsed.warnings:
        click.echo(f"  WARNING: {warning}", err=True)

    sheet = build_sheet(notation, title=Path(notation_file).stem, parsed=parsed)
    stand_layout = MusicStand(sheet, layout_config).layout

    click.echo(f"sheetstand v{__version__}")
    click.echo(f"  Width  : {layout_config.max_chars_per_line} chars  |  "
               f"Height: {layout_config.lines_per_page} lines")
    click.echo(f"  Tokens : {len(stand_layout.tokens)}")
    click.echo(f"  Lines  : {len(stand_layout.lines)}")
    click.echo(f"  Pages  : {stand_layout.total_pages}")

    for page_index, line_range in enumerate(stand_layout.page_ranges):
        click.echo()
        click.echo(f"── Page {page_index + 1} (lines {line_range.start}–{line_range.end - 1}) ──")
        for line in stand_layout.lines[line_range.start:line_range.end]:
            click.echo(f"  {line_length(line):3d}  {line_text(line)}")


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("notation_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file. Defaults to the notation file with the format's extension.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "html"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Plain text page or HTML two-page book spread.",
)
@click.option("--title", default=None, metavar="TEXT", help="Defaults to the file name stem.")
@click.option("--artist", default="", metavar="TEXT", help="Shown in the page footer.")
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True,
              help="Page to show (1-indexed).")
@click.option("--measure", type=click.IntRange(min=0), default=0, show_default=True,
              help="Cursor measure index (0-indexed).")
@click.option("--note", type=click.IntRange(min=0), default=0, show_default=True,
              help="Cursor note index within the measure (0-indexed).")
@click.option("--playing/--stopped", default=False, show_default=True,
              help="Highlight the cursor as if playback were running.")
@click.option("--steps", type=click.IntRange(min=0), default=0, show_default=True,
              help="Advance the cursor N notes before rendering; implies --playing.")
@layout_options
def render(
    notation_file: str,
    output: str | None,
    output_format: str,
    title: str | None,
    artist: str,
    page: int,
    measure: int,
    note: int,
    playing: bool,
    steps: int,
    max_chars: int | None,
    lines_per_page: int | None,
    config_path: str | None,
) -> None:
    """
    Render a notation file as a music stand page (text) or book spread (HTML).

    \b
    Examples:
      sheetstand render song.txt
      sheetstand render song.txt --format html --page 3 -o stand.html
      sheetstand render song.txt --playing --measure 0 --note 12
      sheetstand render song.txt --steps 20 --format html
    """
    from sheetstand.sheet_exporter import SheetExporter

    notation_path = Path(notation_file)
    resolved_title = title if title is not None else notation_path.stem.replace("_", " ")
    normalized_format = output_format.lower()
    suffix = ".html" if normalized_format == "html" else ".stand.txt"
    resolved_output = output if output is not None else str(notation_path.with_suffix(suffix))

    try:
        layout_config, cfg = _resolve_layout(config_path, max_chars, lines_per_page)
    except LayoutConfigError as exc:
        _fail(str(exc))

    playback = PlaybackState(current_page=page - 1, current_measure=measure, current_note_index=note)
    if playing or steps:
        playback = transport.play(playback)

    click.echo(f"sheetstand v{__version__}")
    click.echo(f"  Notation : {notation_file}")
    click.echo(f"  Format   : {normalized_format}")
    click.echo(f"  Output   : {resolved_output}")

    exporter = SheetExporter(
        title=resolved_title,
        output_format=normalized_format,
        layout=layout_config,
        theme=SheetTheme.from_mapping(cfg.get("theme")),
    )
    try:
        exporter.export(
            notation_file, resolved_output, artist=artist, playback=playback, steps=steps
        )
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")
    except ValueError as exc:
        _fail(f"Could not render sheet — {exc}")

    click.echo()
    click.echo(f"Done!  Wrote '{resolved_output}'.")
