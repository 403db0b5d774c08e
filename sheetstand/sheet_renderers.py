"""Renderer implementations for music stand output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

from sheetstand.cursor import is_current_line, is_current_token
from sheetstand.layout import Line
from sheetstand.music_stand import StandView
from sheetstand.sheet_models import CursorPosition, LineRange

CURRENT_LINE_MARKER = "▶"
END_OF_SHEET = "End of sheet"


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


@dataclass(frozen=True)
class SheetTheme:
    """Colour and font tokens supplied by the theme layer."""

    primary: str = "#3e2723"
    accent: str = "#ff9800"
    highlight: str = "rgba(255, 193, 7, 0.2)"
    title_font: str = "Georgia, serif"
    body_font: str = "monospace"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SheetTheme:
        """Build from a ``theme`` config section; unknown keys are ignored."""
        known = {k: str(v) for k, v in (data or {}).items() if k in cls.__dataclass_fields__}
        return cls(**known)


def page_footer(artist: str, page_number: int, total_pages: int) -> str:
    prefix = f"{artist} - " if artist else ""
    return f"{prefix}Page {page_number} of {total_pages}"


class SheetRenderer(ABC):
    """Abstract music stand renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(
        self,
        *,
        title: str,
        view: StandView,
        theme: SheetTheme | None = None,
    ) -> str:
        """Render the view into a file content string."""


class TextStandRenderer(SheetRenderer):
    """
    Render the active page as plain text.

    The cursor line is prefixed with ``▶`` and the sounding token is wrapped
    in square brackets.
    """

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render_line(
        self,
        line: Line,
        cursor: CursorPosition,
        line_range: LineRange | None,
        line_idx: int,
    ) -> str:
        parts: list[str] = []
        for token in line:
            text = token.text.rstrip()
            parts.append(f"[{text}]" if is_current_token(cursor, token) else text)
        marker = CURRENT_LINE_MARKER if is_current_line(cursor, line_range, line_idx) else " "
        return f"{marker} {' '.join(parts)}"

    def render(
        self,
        *,
        title: str,
        view: StandView,
        theme: SheetTheme | None = None,
    ) -> str:
        out: list[str] = [title] if title else []
        if view.sheet.artist:
            out.append(view.sheet.artist)
        if out:
            out.append("")

        page_index = view.playback.current_page
        line_range = view.page_range(page_index)
        if line_range is None:
            out.append(END_OF_SHEET)
            return "\n".join(out) + "\n"

        for line_idx, line in enumerate(view.page_lines(page_index)):
            out.append(self.render_line(line, view.cursor, line_range, line_idx))

        out.append("")
        out.append(page_footer(view.sheet.artist, page_index + 1, view.total_pages))
        return "\n".join(out) + "\n"


class HtmlBookRenderer(SheetRenderer):
    """Render the current two-page spread into a self-contained HTML document."""

    @property
    def default_extension(self) -> str:
        return ".html"

    def _token_html(self, text: str, active: bool) -> str:
        if active:
            return f'<span class="token current">{_escape_html(text)}</span>'
        return f'<span class="token">{_escape_html(text)}</span>'

    def _line_html(
        self,
        line: Line,
        cursor: CursorPosition,
        line_range: LineRange,
        line_idx: int,
        page_active: bool,
    ) -> str:
        current = page_active and is_current_line(cursor, line_range, line_idx)
        marker = CURRENT_LINE_MARKER if current else ""
        tokens = "".join(
            self._token_html(token.text, page_active and is_current_token(cursor, token))
            for token in line
        )
        css = "line current" if current else "line"
        return (
            f'      <div class="{css}"><span class="marker">{marker}</span>{tokens}</div>'
        )

    def build_page(
        self,
        view: StandView,
        line_range: LineRange | None,
        side: str,
        title: str,
    ) -> str:
        """
        Build one page of the spread.

        Highlighting only shows on the page playback is on. A side the
        sheet never reaches (``line_range`` is None) becomes a faded
        "End of sheet" placeholder.
        """
        if line_range is None:
            return (
                f'  <div class="page {side} empty">\n'
                f'    <div class="caption">{END_OF_SHEET}</div>\n'
                f"  </div>"
            )

        page_index = line_range.page_number - 1
        page_active = view.is_active_page(page_index)
        heading = _escape_html(title) if side == "left" else ""
        lines = "\n".join(
            self._line_html(line, view.cursor, line_range, line_idx, page_active)
            for line_idx, line in enumerate(view.range_lines(line_range))
        )
        footer = _escape_html(page_footer(view.sheet.artist, page_index + 1, view.total_pages))
        return (
            f'  <div class="page {side}">\n'
            f'    <h2 class="title">{heading}</h2>\n'
            f'    <div class="notation">\n{lines}\n    </div>\n'
            f'    <div class="footer">{footer}</div>\n'
            f"  </div>"
        )

    def render(
        self,
        *,
        title: str,
        view: StandView,
        theme: SheetTheme | None = None,
    ) -> str:
        theme = theme or SheetTheme()
        title_safe = _escape_html(title)
        pages = "\n".join((
            self.build_page(view, view.left_page, "left", title),
            self.build_page(view, view.right_page, "right", title),
        ))

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    .book {{
      display: flex;
      gap: 1rem;
      aspect-ratio: 14 / 4;
      background: rgba(139, 69, 19, 0.1);
      border-radius: 8px;
      box-shadow: 0 8px 32px rgba(0, 0, 0, 0.3);
      padding: 1rem;
    }}
    .page {{
      flex: 1;
      display: flex;
      flex-direction: column;
      background: #fff;
      border-radius: 4px;
      padding: 1.5rem 2rem;
      position: relative;
    }}
    .page.empty {{
      opacity: 0.3;
      justify-content: center;
      align-items: center;
    }}
    .caption {{
      font-size: 0.75rem;
      color: #9e9e9e;
      text-align: center;
    }}
    .title {{
      font-family: {theme.title_font};
      font-size: 1.1rem;
      color: {theme.primary};
      min-height: 1.4rem;
    }}
    .notation {{
      flex: 1;
      font-family: {theme.body_font};
      line-height: 1.8;
      white-space: pre-wrap;
    }}
    .line {{
      border-radius: 4px;
      padding: 0 0.25rem;
    }}
    .line.current {{
      background-color: {theme.highlight};
    }}
    .marker {{
      display: inline-block;
      width: 1.2em;
      color: {theme.accent};
    }}
    .token.current {{
      font-weight: bold;
      color: {theme.accent};
      text-shadow: 0 0 6px {theme.accent};
    }}
    .footer {{
      font-family: {theme.body_font};
      font-size: 0.8rem;
      text-align: center;
      color: {theme.primary};
      opacity: 0.7;
    }}
  </style>
</head>
<body>
<div class="book">
{pages}
</div>
</body>
</html>"""
