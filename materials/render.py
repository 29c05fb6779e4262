import logging
from io import BytesIO
from typing import Iterable

from docx import Document as WordDocument
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

from .document import BlankLine, Bullet, Document, DocumentKind, Header, Paragraph, Run, Separator
from .errors import RenderError

logger = logging.getLogger(__name__)

FONT_FAMILY = "Times New Roman"
REGULAR_FONT_SIZE = 12
HEADER_FONT_SIZE = 14
LINK_COLOR = "0563C1"
BULLET_STYLE = "List Bullet"
HYPERLINK_STYLE = "Hyperlink"

# Paragraph spacing in points.
DEFAULT_SPACE_AFTER = 5
COVER_LETTER_BLANK_SPACE_AFTER = 6
HEADER_SPACE_BEFORE = 12
HEADER_SPACE_AFTER = 6
SEPARATOR_SPACE_BEFORE = 5
SEPARATOR_SPACE_AFTER = 10
BULLET_LEFT_INDENT = 36
BULLET_HANGING_INDENT = 18


def _tight(p, before=0, after=0):
    p.paragraph_format.space_before = Pt(before)
    p.paragraph_format.space_after = Pt(after)


def _configure_styles(doc):
    normal = doc.styles["Normal"]
    normal.font.name = FONT_FAMILY
    normal.font.size = Pt(REGULAR_FONT_SIZE)
    normal.paragraph_format.space_after = Pt(DEFAULT_SPACE_AFTER)
    normal.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY

    try:
        doc.styles[HYPERLINK_STYLE]
    except KeyError:
        link = doc.styles.add_style(HYPERLINK_STYLE, WD_STYLE_TYPE.CHARACTER)
        link.font.color.rgb = RGBColor.from_string(LINK_COLOR)
        link.font.underline = True


def _add_text_run(paragraph, text: str, *, bold: bool = False, font_size: int = REGULAR_FONT_SIZE):
    run = paragraph.add_run(text)
    run.font.name = FONT_FAMILY
    run.font.size = Pt(font_size)
    run.bold = bold
    return run


def _add_hyperlink(paragraph, text, url):
    part = paragraph.part
    r_id = part.relate_to(url, RT.HYPERLINK, is_external=True)

    hyperlink = OxmlElement('w:hyperlink')
    hyperlink.set(qn('r:id'), r_id)

    new_run = OxmlElement('w:r')
    rPr = OxmlElement('w:rPr')

    rStyle = OxmlElement('w:rStyle')
    rStyle.set(qn('w:val'), HYPERLINK_STYLE)
    rPr.append(rStyle)

    # Explicit formatting too, so the link reads as one even without the style.
    rFonts = OxmlElement('w:rFonts')
    rFonts.set(qn('w:ascii'), FONT_FAMILY)
    rFonts.set(qn('w:hAnsi'), FONT_FAMILY)
    rPr.append(rFonts)
    color = OxmlElement('w:color')
    color.set(qn('w:val'), LINK_COLOR)
    rPr.append(color)
    size = OxmlElement('w:sz')
    size.set(qn('w:val'), str(REGULAR_FONT_SIZE * 2))
    rPr.append(size)
    underline = OxmlElement('w:u')
    underline.set(qn('w:val'), 'single')
    rPr.append(underline)

    new_run.append(rPr)
    t = OxmlElement('w:t')
    t.text = text
    t.set(qn('xml:space'), 'preserve')
    new_run.append(t)
    hyperlink.append(new_run)
    paragraph._p.append(hyperlink)
    return hyperlink


def _add_runs(paragraph, runs: Iterable[Run]):
    """Add IDM runs to a paragraph; links never pick up bold."""
    for run in runs:
        if run.hyperlink:
            _add_hyperlink(paragraph, run.text, run.hyperlink)
        else:
            _add_text_run(paragraph, run.text, bold=run.emphasis)


def _add_bottom_border(paragraph):
    # pBdr must precede spacing/jc inside pPr, so add it before any formatting.
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = OxmlElement('w:pBdr')
    bottom = OxmlElement('w:bottom')
    bottom.set(qn('w:val'), 'single')
    bottom.set(qn('w:sz'), '6')
    bottom.set(qn('w:space'), '1')
    bottom.set(qn('w:color'), 'auto')
    pBdr.append(bottom)
    pPr.append(pBdr)


def _add_header(doc, block: Header):
    p = doc.add_paragraph()
    _tight(p, before=HEADER_SPACE_BEFORE, after=HEADER_SPACE_AFTER)
    p.alignment = WD_ALIGN_PARAGRAPH.LEFT
    _add_text_run(p, block.label, bold=True, font_size=HEADER_FONT_SIZE)


def _add_separator(doc):
    p = doc.add_paragraph()
    _add_bottom_border(p)
    _tight(p, before=SEPARATOR_SPACE_BEFORE, after=SEPARATOR_SPACE_AFTER)


def _add_bullet(doc, block: Bullet):
    p = doc.add_paragraph(style=BULLET_STYLE)
    _tight(p, after=DEFAULT_SPACE_AFTER)
    p.alignment = WD_ALIGN_PARAGRAPH.LEFT
    p.paragraph_format.left_indent = Pt(BULLET_LEFT_INDENT)
    p.paragraph_format.first_line_indent = Pt(-BULLET_HANGING_INDENT)
    if block.runs:
        _add_runs(p, block.runs)
    else:
        # an empty bullet still shows its marker
        _add_text_run(p, "")


def _add_paragraph(doc, block: Paragraph, kind: DocumentKind):
    p = doc.add_paragraph()
    _tight(p, after=DEFAULT_SPACE_AFTER)
    p.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY if kind.justified else WD_ALIGN_PARAGRAPH.LEFT
    _add_runs(p, block.runs)


def _add_blank_line(doc, kind: DocumentKind):
    p = doc.add_paragraph()
    after = COVER_LETTER_BLANK_SPACE_AFTER if kind is DocumentKind.COVER_LETTER else DEFAULT_SPACE_AFTER
    _tight(p, after=after)


def build_docx(document: Document, kind: DocumentKind):
    """Build a python-docx Document; pagination is left to the viewer."""
    kind = DocumentKind(kind)
    doc = WordDocument()
    _configure_styles(doc)

    for block in document.blocks:
        if isinstance(block, Header):
            _add_header(doc, block)
        elif isinstance(block, Separator):
            _add_separator(doc)
        elif isinstance(block, Bullet):
            _add_bullet(doc, block)
        elif isinstance(block, Paragraph):
            _add_paragraph(doc, block, kind)
        elif isinstance(block, BlankLine):
            _add_blank_line(doc, kind)
        else:
            raise TypeError(f"unsupported block: {block!r}")
    return doc


def render_docx(document: Document, kind: DocumentKind) -> bytes:
    try:
        doc = build_docx(document, kind)
        buffer = BytesIO()
        doc.save(buffer)
    except Exception as e:
        logger.exception("DOCX generation failed")
        raise RenderError("Failed to generate DOCX file.", format="docx", original_error=e) from e
    return buffer.getvalue()
