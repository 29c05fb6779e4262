from materials.document import BlankLine, Bullet, Header, Paragraph, Run, Separator
from materials.markup import parse_inline, tokenize, tokenize_line

RESUME = """**PERSONAL PROFILE**
Engineer with **Python** experience. See https://example.com/jane
---
**EXPERIENCE**
* Led **React** migration
- Cut build times by 40%

*
---
**EDUCATION**
BSc Computer Science"""


def test_tokenize_is_deterministic():
    assert tokenize(RESUME) == tokenize(RESUME)


def test_one_block_per_line():
    doc = tokenize(RESUME)
    assert len(doc.blocks) == len(RESUME.split("\n"))


def test_separator_count_and_order_preserved():
    doc = tokenize(RESUME)
    assert doc.count(Separator) == 2
    kinds = [type(b).__name__ for b in doc.blocks]
    assert kinds.index("Separator") == 2
    assert kinds[8] == "Separator"


def test_bold_parity():
    assert parse_inline("a **b** c") == (
        Run(text="a "),
        Run(text="b", emphasis=True),
        Run(text=" c"),
    )


def test_unmatched_bold_runs_to_end_of_line():
    runs = parse_inline("plain **bold to the end")
    assert runs == (Run(text="plain "), Run(text="bold to the end", emphasis=True))


def test_url_extraction():
    runs = parse_inline("See https://example.com/x for more")
    assert runs == (
        Run(text="See "),
        Run(text="https://example.com/x", hyperlink="https://example.com/x"),
        Run(text=" for more"),
    )


def test_url_inside_bold_is_not_emphasized():
    runs = parse_inline("**Portfolio: https://example.com/p**")
    assert runs[0] == Run(text="Portfolio: ", emphasis=True)
    assert runs[1].hyperlink == "https://example.com/p"
    assert runs[1].emphasis is False


def test_header_detection():
    assert tokenize_line("**EXPERIENCE**") == Header(label="EXPERIENCE")
    assert tokenize_line("**PERSONAL PROFILE**") == Header(label="PERSONAL PROFILE")
    mixed = tokenize_line("**Experience**")
    assert isinstance(mixed, Paragraph)
    assert mixed.runs == (Run(text="Experience", emphasis=True),)


def test_empty_bullet_is_kept():
    block = tokenize_line("* ")
    assert block == Bullet(level=0, runs=())


def test_bullet_markers_and_indent_flattened():
    assert tokenize_line("- item") == Bullet(runs=(Run(text="item"),))
    assert tokenize_line("    * nested").level == 0
    bullet = tokenize_line("* Led **React** work")
    assert bullet.runs[1] == Run(text="React", emphasis=True)


def test_separator_tolerates_surrounding_whitespace():
    assert tokenize_line("  ---  ") == Separator()
    assert isinstance(tokenize_line("----"), Paragraph)


def test_blank_and_whitespace_lines():
    assert tokenize_line("") == BlankLine()
    assert tokenize_line("   ") == BlankLine()


def test_only_bold_markers_yields_empty_paragraph():
    assert tokenize_line("****") == Paragraph(runs=())


def test_crlf_and_none_input():
    doc = tokenize("**SKILLS**\r\nPython\r\n")
    assert doc.blocks[0] == Header(label="SKILLS")
    assert doc.blocks[1] == Paragraph(runs=(Run(text="Python"),))
    assert doc.blocks[2] == BlankLine()
    assert tokenize(None).blocks == ()


def test_no_run_keeps_bold_markers():
    doc = tokenize("odd ***bold*** and ** dangling\n* **x")
    for block in doc.blocks:
        for run in getattr(block, "runs", ()):
            assert "**" not in run.text
