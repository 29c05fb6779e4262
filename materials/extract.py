import re
from typing import Dict, Optional, Sequence, Tuple

APPLICANT_NAME = "APPLICANT_NAME"
COMPANY_NAME = "COMPANY_NAME"
MISSING_VALUE = "N/A"


def parse_prefix_data(text: str, prefix: str) -> Tuple[Optional[str], str]:
    """Pull a leading `PREFIX: value` line off generated text.

    Only a line at the very start of the text counts. Returns (value, rest);
    "N/A" in any case reads as no value, but the line is still removed.
    """
    text = text or ""
    # [ \t]* rather than \s* so an empty value cannot swallow the next line
    pattern = re.compile(rf"^{re.escape(prefix)}:[ \t]*(.+)\r?\n", re.I)
    m = pattern.match(text)
    if not m or not m.group(1).strip():
        return None, text
    value = m.group(1).strip()
    if value.upper() == MISSING_VALUE:
        value = None
    return value, text[m.end():]


def strip_prefixes(text: str, prefixes: Sequence[str]) -> Tuple[Dict[str, Optional[str]], str]:
    """Apply parse_prefix_data for each prefix in order; returns the values and clean body."""
    values = {}
    for prefix in prefixes:
        values[prefix], text = parse_prefix_data(text, prefix)
    return values, text.strip()
