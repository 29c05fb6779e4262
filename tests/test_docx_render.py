from io import BytesIO

import pytest
from docx import Document as load_docx
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt

import materials.render as render
from materials.document import DocumentKind
from materials.errors import RenderError
from materials.markup import tokenize
from materials.render import render_docx

TEXT = """**EXPERIENCE**
Built **Python** services. See https://example.com/jane
---
* Led **React** migration
* """


def _reopen(data):
    return load_docx(BytesIO(data))


def test_docx_one_paragraph_per_block():
    doc = _reopen(render_docx(tokenize(TEXT), DocumentKind.RESUME))
    assert len(doc.paragraphs) == 5


def test_header_is_bold_and_larger():
    doc = _reopen(render_docx(tokenize(TEXT), DocumentKind.RESUME))
    header = doc.paragraphs[0]
    assert header.text == "EXPERIENCE"
    assert header.runs[0].bold is True
    assert header.runs[0].font.size == Pt(14)


def test_bold_runs_and_hyperlink():
    doc = _reopen(render_docx(tokenize(TEXT), DocumentKind.RESUME))
    body = doc.paragraphs[1]
    bold = [r.text for r in body.runs if r.bold]
    assert bold == ["Python"]
    links = body.hyperlinks
    assert len(links) == 1
    assert links[0].url == "https://example.com/jane"
    assert "https://example.com/jane" in body.text


def test_separator_has_bottom_border():
    doc = _reopen(render_docx(tokenize(TEXT), DocumentKind.RESUME))
    sep = doc.paragraphs[2]
    pBdr = sep._p.pPr.find(qn("w:pBdr"))
    assert pBdr is not None
    assert pBdr.find(qn("w:bottom")) is not None


def test_bullets_use_list_style_and_empty_bullet_survives():
    doc = _reopen(render_docx(tokenize(TEXT), DocumentKind.RESUME))
    bullets = [p for p in doc.paragraphs if p.style.name == "List Bullet"]
    assert len(bullets) == 2
    assert bullets[0].text == "Led React migration"
    assert bullets[1].text == ""


def test_alignment_depends_on_kind():
    text = "A paragraph of body text."
    letter = _reopen(render_docx(tokenize(text), DocumentKind.COVER_LETTER))
    answers = _reopen(render_docx(tokenize(text), DocumentKind.ANSWERS))
    assert letter.paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.JUSTIFY
    assert answers.paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.LEFT


@pytest.mark.parametrize("kind,after", [
    (DocumentKind.COVER_LETTER, Pt(6)),
    (DocumentKind.RESUME, Pt(5)),
    (DocumentKind.ANSWERS, Pt(5)),
])
def test_blank_line_spacing_by_kind(kind, after):
    doc = _reopen(render_docx(tokenize("First paragraph\n\nSecond paragraph"), kind))
    blank = doc.paragraphs[1]
    assert blank.text == ""
    assert blank.paragraph_format.space_after == after
    assert blank.paragraph_format.space_before == Pt(0)


def test_body_font_is_times():
    doc = _reopen(render_docx(tokenize("Hello"), DocumentKind.ANSWERS))
    normal = doc.styles["Normal"]
    assert normal.font.name == "Times New Roman"
    assert normal.font.size == Pt(12)


def test_builder_failure_becomes_render_error(monkeypatch):
    def boom(document, kind):
        raise ValueError("broken")

    monkeypatch.setattr(render, "build_docx", boom)
    with pytest.raises(RenderError) as exc:
        render_docx(tokenize("x"), DocumentKind.RESUME)
    assert exc.value.format == "docx"
    assert isinstance(exc.value.original_error, ValueError)
