"""
Manual layout on a ReportLab canvas.

ReportLab's canvas has no reflow, so wrapping, justification, page breaks and
the cursor are computed here. The cursor works top-down (y grows toward the
bottom of the page, like a text editor); coordinates are flipped to the
canvas's bottom-up system only at draw time.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from reportlab.pdfbase.pdfmetrics import stringWidth

from .document import Run

BLACK = (0, 0, 0)
LINK_BLUE = (0, 0, 1)

_TOKEN_PATTERN = re.compile(r"\S+|\s+")


@dataclass(frozen=True)
class TextStyle:
    font_name: str
    font_size: float
    line_height: float
    color: tuple = BLACK

    def width(self, text: str) -> float:
        return stringWidth(text, self.font_name, self.font_size)


@dataclass
class LayoutCursor:
    x: float
    y: float
    page_width: float
    page_height: float
    margin: float

    @property
    def usable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    def reset(self) -> None:
        self.x = self.margin
        self.y = self.margin


def _split_long_word(word: str, style: TextStyle, width: float) -> List[str]:
    chunks = []
    current = ""
    for ch in word:
        if current and style.width(current + ch) > width:
            chunks.append(current)
            current = ch
        else:
            current += ch
    if current:
        chunks.append(current)
    return chunks


def wrap_text(text: str, style: TextStyle, width: float, first_width: Optional[float] = None) -> List[str]:
    """Greedy word wrap measured with the style's font metrics.

    `first_width` is the room left on the line the text starts on; later lines
    get the full `width`. When not even the first word fits there, the first
    returned line is "" so the caller drops to a fresh line before drawing.
    Interior whitespace is kept as written; lines that break are right-stripped
    while the final line keeps its trailing space so inline runs stay apart.
    Words wider than `width` are split into character chunks.
    """
    if not text.strip():
        return [text]

    avail = width if first_width is None else min(first_width, width)
    lines: List[str] = []
    current = ""
    for token in _TOKEN_PATTERN.findall(text):
        if token.isspace():
            if current or not lines:
                current += token
            continue
        candidate = current + token
        if style.width(candidate) <= avail:
            current = candidate
            continue
        if current.strip():
            lines.append(current.rstrip())
            current = ""
            avail = width
        elif avail < width:
            # nothing placed yet on a narrowed first line: start on a new line
            lines.append("")
            current = ""
            avail = width
        if style.width(current + token) <= avail:
            current += token
            continue
        chunks = _split_long_word(token, style, avail)
        lines.extend(chunks[:-1])
        current = chunks[-1]
    lines.append(current)
    return lines


class PdfLayout:
    """Cursor, page-break rule and the two shared 'wrap and advance' primitives.

    One instance per render; it owns the cursor and is never shared.
    """

    def __init__(self, canvas, page_width: float, page_height: float, margin: float) -> None:
        self.canvas = canvas
        self.cursor = LayoutCursor(
            x=margin,
            y=margin,
            page_width=page_width,
            page_height=page_height,
            margin=margin,
        )

    @property
    def page_number(self) -> int:
        return self.canvas.getPageNumber()

    def ensure_space(self, height: float) -> bool:
        """Start a new page when `height` does not fit below the cursor."""
        if self.cursor.y + height > self.cursor.bottom:
            self.canvas.showPage()
            self.cursor.reset()
            return True
        return False

    def advance(self, height: float) -> None:
        self.ensure_space(height)
        self.cursor.y += height

    def _canvas_y(self, y: float) -> float:
        return self.cursor.page_height - y

    def draw_text(self, text: str, x: float, style: TextStyle) -> float:
        """Draw one line at the cursor's baseline and return its width."""
        if text:
            self.canvas.setFont(style.font_name, style.font_size)
            self.canvas.setFillColorRGB(*style.color)
            self.canvas.drawString(x, self._canvas_y(self.cursor.y), text)
        return style.width(text)

    def draw_justified(self, text: str, x: float, width: float, style: TextStyle) -> None:
        gaps = text.count(" ")
        if not gaps:
            self.draw_text(text, x, style)
            return
        extra = max(0.0, (width - style.width(text)) / gaps)
        obj = self.canvas.beginText(x, self._canvas_y(self.cursor.y))
        obj.setFont(style.font_name, style.font_size)
        obj.setFillColorRGB(*style.color)
        obj.setWordSpace(extra)
        obj.textOut(text)
        self.canvas.drawText(obj)

    def draw_rule(self, x1: float, x2: float, line_width: float = 0.5, color: tuple = BLACK) -> None:
        y = self._canvas_y(self.cursor.y)
        self.canvas.setStrokeColorRGB(*color)
        self.canvas.setLineWidth(line_width)
        self.canvas.line(x1, y, x2, y)

    def write_lines(self, text: str, style: TextStyle, align: str = "left") -> int:
        """Wrap `text` to the usable width and write it line by line.

        Each line gets its own page-break check. With align="justify" every
        line but the last is stretched to the full width. Returns the number
        of lines written.
        """
        width = self.cursor.usable_width
        lines = wrap_text(text, style, width)
        for index, line in enumerate(lines):
            self.ensure_space(style.line_height)
            line = line.strip()
            if align == "justify" and index < len(lines) - 1:
                self.draw_justified(line, self.cursor.margin, width, style)
            else:
                self.draw_text(line, self.cursor.margin, style)
            self.cursor.y += style.line_height
        return len(lines)

    def _draw_link(self, text: str, url: str, x: float, style: TextStyle) -> None:
        visible = text.rstrip()
        if not visible.strip():
            return
        width = style.width(visible)
        baseline = self._canvas_y(self.cursor.y)
        self.canvas.setStrokeColorRGB(*style.color)
        self.canvas.setLineWidth(0.5)
        self.canvas.line(x, baseline - 1.5, x + width, baseline - 1.5)
        self.canvas.setStrokeColorRGB(*BLACK)
        self.canvas.linkURL(url, (x, baseline - 2, x + width, baseline + style.font_size), relative=0)

    def write_runs(self, runs: Iterable[Run], x: float, indent: float, styles: dict) -> None:
        """Lay out styled runs left to right, starting at `x`.

        Runs are wrapped one at a time against the room left on the current
        line; continuation lines drop one line height and restart at `indent`.
        `styles` maps "regular", "bold" and "link" to a TextStyle, all sharing
        one line height. The cursor ends one line below the last line written.
        """
        line_height = styles["regular"].line_height
        right = self.cursor.page_width - self.cursor.margin
        self.ensure_space(line_height)
        self.cursor.x = x
        for run in runs:
            if run.hyperlink:
                style = styles["link"]
            elif run.emphasis:
                style = styles["bold"]
            else:
                style = styles["regular"]
            lines = wrap_text(run.text, style, right - indent, first_width=right - self.cursor.x)
            for index, line in enumerate(lines):
                if index > 0:
                    self.cursor.y += line_height
                    self.ensure_space(line_height)
                    self.cursor.x = indent
                    line = line.lstrip()
                width = self.draw_text(line, self.cursor.x, style)
                if run.hyperlink:
                    self._draw_link(line, run.hyperlink, self.cursor.x, style)
                self.cursor.x += width
        self.cursor.y += line_height
        self.cursor.x = self.cursor.margin
