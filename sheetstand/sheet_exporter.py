"""SheetExporter: lays out a notation file and writes it as text or HTML."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from sheetstand.config import LayoutConfig
from sheetstand.music_stand import MusicStand, StandView
from sheetstand.notation_parser import build_sheet
from sheetstand.sheet_models import MusicSheet, PlaybackState
from sheetstand.sheet_renderers import (
    HtmlBookRenderer,
    SheetRenderer,
    SheetTheme,
    TextStandRenderer,
)
from sheetstand.transport import advance, update_position

SUPPORTED_FORMATS: Final[set[str]] = {"text", "html"}


class SheetExporter:
    """
    Render a Virtual Piano notation file through a pluggable renderer.

    Supported formats:
    - ``text``: the active page as plain text with the cursor line marked.
    - ``html``: the current two-page spread as a self-contained HTML file.
    """

    def __init__(
        self,
        title: str = "",
        output_format: str = "text",
        layout: LayoutConfig | None = None,
        theme: SheetTheme | None = None,
    ) -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.layout = layout if layout is not None else LayoutConfig()
        self.theme = theme
        self.renderer = self._build_renderer(normalized)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> SheetRenderer:
        if output_format == "html":
            return HtmlBookRenderer()
        return TextStandRenderer()

    def _read_notation(self, notation_path: str) -> str:
        return Path(notation_path).read_text(encoding="utf-8")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_view(self, sheet: MusicSheet, playback: PlaybackState | None = None) -> StandView:
        stand = MusicStand(sheet, self.layout)
        return stand.view(playback if playback is not None else PlaybackState(current_sheet_id=sheet.id))

    def advance_playback(
        self,
        sheet: MusicSheet,
        playback: PlaybackState,
        steps: int,
    ) -> PlaybackState:
        """
        Step ``playback`` forward ``steps`` notes, then turn to the page the
        cursor is on when auto-scroll is enabled. Stops early if playback ends.
        """
        measures = sheet.measures
        for _ in range(steps):
            if not playback.is_playing:
                break
            playback = advance(playback, measures)
        page = MusicStand(sheet, self.layout).auto_scroll_page(playback)
        return update_position(playback, page=page)

    def render_sheet(self, sheet: MusicSheet, playback: PlaybackState | None = None) -> str:
        return self.renderer.render(
            title=self.title or sheet.title,
            view=self.build_view(sheet, playback),
            theme=self.theme,
        )

    def export(
        self,
        notation_path: str,
        output_path: str,
        *,
        artist: str = "",
        tempo: int = 120,
        playback: PlaybackState | None = None,
        steps: int = 0,
    ) -> None:
        """
        Parse a notation file, lay it out and write the rendered stand to disk.

        With ``steps``, the cursor is advanced that many notes from
        ``playback`` before rendering.

        Raises:
            LayoutConfigError: If the layout is invalid.
            OSError: If the input cannot be read or the output cannot be written.
        """
        sheet = build_sheet(
            self._read_notation(notation_path),
            title=self.title or Path(notation_path).stem,
            artist=artist,
            tempo=tempo,
        )
        if playback is not None and steps:
            playback = self.advance_playback(sheet, playback, steps)
        content = self.render_sheet(sheet, playback)

        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
