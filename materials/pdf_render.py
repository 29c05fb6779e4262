import logging
from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .document import BlankLine, Bullet, Document, DocumentKind, Header, Paragraph, Separator
from .errors import RenderError
from .pdf_layout import LINK_BLUE, PdfLayout, TextStyle

logger = logging.getLogger(__name__)

FONT_REGULAR = "Times-Roman"
FONT_BOLD = "Times-Bold"
REGULAR_FONT_SIZE = 12
HEADER_FONT_SIZE = 14
LINE_HEIGHT = REGULAR_FONT_SIZE * 1.2
HEADER_LINE_HEIGHT = HEADER_FONT_SIZE * 1.2
MARGIN = 50
BULLET_SYMBOL = "•"
BULLET_TEXT_INDENT = 25
SEPARATOR_GAP = 5
SEPARATOR_HEIGHT = 15

REGULAR = TextStyle(FONT_REGULAR, REGULAR_FONT_SIZE, LINE_HEIGHT)
BOLD = TextStyle(FONT_BOLD, REGULAR_FONT_SIZE, LINE_HEIGHT)
LINK = TextStyle(FONT_REGULAR, REGULAR_FONT_SIZE, LINE_HEIGHT, color=LINK_BLUE)
HEADER = TextStyle(FONT_BOLD, HEADER_FONT_SIZE, HEADER_LINE_HEIGHT)
RUN_STYLES = {"regular": REGULAR, "bold": BOLD, "link": LINK}


def _render_separator(layout: PdfLayout):
    cur = layout.cursor
    layout.ensure_space(SEPARATOR_HEIGHT)
    cur.y += SEPARATOR_GAP
    layout.draw_rule(cur.margin, cur.page_width - cur.margin)
    cur.y += SEPARATOR_GAP + LINE_HEIGHT


def _render_bullet(layout: PdfLayout, block: Bullet):
    cur = layout.cursor
    layout.ensure_space(LINE_HEIGHT)
    layout.draw_text(BULLET_SYMBOL, cur.margin, REGULAR)
    text_x = cur.margin + BULLET_TEXT_INDENT
    if block.runs:
        layout.write_runs(block.runs, x=text_x, indent=text_x, styles=RUN_STYLES)
    else:
        cur.y += LINE_HEIGHT


def _render_paragraph(layout: PdfLayout, block: Paragraph, kind: DocumentKind):
    if kind.justified:
        # ReportLab's text primitives cannot justify mixed-style runs, so bold
        # and links are flattened to plain text in justified body copy.
        text = " ".join(block.plain_text.split())
        layout.write_lines(text, REGULAR, align="justify")
    elif block.runs:
        layout.write_runs(block.runs, x=layout.cursor.margin, indent=layout.cursor.margin, styles=RUN_STYLES)
    else:
        layout.advance(LINE_HEIGHT)


def draw_document(layout: PdfLayout, document: Document, kind: DocumentKind) -> None:
    for block in document.blocks:
        if isinstance(block, Header):
            layout.write_lines(block.label, HEADER)
        elif isinstance(block, Separator):
            _render_separator(layout)
        elif isinstance(block, Bullet):
            _render_bullet(layout, block)
        elif isinstance(block, Paragraph):
            _render_paragraph(layout, block, kind)
        elif isinstance(block, BlankLine):
            layout.advance(LINE_HEIGHT)
        else:
            raise TypeError(f"unsupported block: {block!r}")


def render_pdf(document: Document, kind: DocumentKind, title: Optional[str] = None) -> bytes:
    """Lay out a Document on A4 pages and return the PDF bytes."""
    kind = DocumentKind(kind)
    buffer = BytesIO()
    try:
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(title or kind.display_name)
        page_width, page_height = A4
        layout = PdfLayout(pdf, page_width, page_height, MARGIN)
        draw_document(layout, document, kind)
        pdf.save()
    except Exception as e:
        logger.exception("PDF generation failed")
        raise RenderError(f"Failed to generate PDF file: {e}", format="pdf", original_error=e) from e
    return buffer.getvalue()
