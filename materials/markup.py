import re
from typing import List, Optional, Tuple

from .document import BlankLine, Block, Bullet, Document, Header, Paragraph, Run, Separator

SEPARATOR_TOKEN = "---"
BOLD_DELIMITER = "**"

BULLET_PATTERN = re.compile(r"^\s*([*-])\s+(.*)$")
HEADER_PATTERN = re.compile(r"^\*\*(.+?)\*\*$")
HEADER_LABEL_PATTERN = re.compile(r"^[A-Z][A-Z\s]*$")
URL_PATTERN = re.compile(
    r"\b((?:https?|ftp)://[-\w@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b(?:[-\w()@:%_+.~#?&/=]*))\b"
)


def _split_bold_segments(text: str) -> List[Tuple[str, bool]]:
    """Split a line on ** into (segment, bold) pairs.

    Every delimiter flips the bold state, so an unmatched trailing ** simply
    leaves the rest of the line bold. Empty segments are kept so the caller
    sees the toggles, but they never become runs.
    """
    return [(part, index % 2 == 1) for index, part in enumerate(text.split(BOLD_DELIMITER))]


def _split_urls(segment: str, bold: bool) -> List[Run]:
    runs = []
    pos = 0
    for match in URL_PATTERN.finditer(segment):
        if match.start() > pos:
            runs.append(Run(text=segment[pos:match.start()], emphasis=bold))
        url = match.group(0)
        runs.append(Run(text=url, hyperlink=url))
        pos = match.end()
    if pos < len(segment):
        runs.append(Run(text=segment[pos:], emphasis=bold))
    return runs


def parse_inline(text: str) -> Tuple[Run, ...]:
    """Resolve bold toggles and embedded URLs into an ordered tuple of runs."""
    runs: List[Run] = []
    for segment, bold in _split_bold_segments(text):
        if not segment:
            continue
        runs.extend(_split_urls(segment, bold))
    return tuple(runs)


def _match_header(line: str) -> Optional[str]:
    m = HEADER_PATTERN.match(line.strip())
    if not m:
        return None
    label = m.group(1).strip()
    if not HEADER_LABEL_PATTERN.match(label):
        return None
    return label


def tokenize_line(line: str) -> Block:
    if line.strip() == SEPARATOR_TOKEN:
        return Separator()

    bullet = BULLET_PATTERN.match(line)
    if bullet:
        # Only one level is supported; indented bullets are flattened.
        return Bullet(level=0, runs=parse_inline(bullet.group(2)))

    label = _match_header(line)
    if label is not None:
        return Header(label=label)

    if not line.strip():
        return BlankLine()

    # A line made only of ** toggles yields no runs but still keeps its line.
    return Paragraph(runs=parse_inline(line))


def tokenize(raw_text: str) -> Document:
    """Turn lightly marked-up generated text into a Document.

    Never raises on malformed markup; every input line yields exactly one block.
    """
    if raw_text is None:
        return Document()
    lines = [line.rstrip("\r") for line in raw_text.split("\n")]
    return Document(blocks=tuple(tokenize_line(line) for line in lines))
