import re
from typing import Optional

from .document import DocumentFormat, DocumentKind

DEFAULT_APPLICANT = "Applicant"

_WHITESPACE = re.compile(r"\s+")
_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def sanitize_for_filename(name: Optional[str]) -> Optional[str]:
    """Whitespace runs become underscores; anything outside [A-Za-z0-9_.-] is dropped."""
    if not name:
        return None
    cleaned = _UNSAFE.sub("", _WHITESPACE.sub("_", name.strip()))
    return cleaned or None


def derive_file_name(
    kind: DocumentKind,
    fmt: DocumentFormat,
    applicant_name: Optional[str] = None,
    company_name: Optional[str] = None,
) -> str:
    kind = DocumentKind(kind)
    fmt = DocumentFormat(fmt)
    applicant = sanitize_for_filename(applicant_name)
    company = sanitize_for_filename(company_name)

    if company:
        stem = f"{company}_{applicant or DEFAULT_APPLICANT}_{kind.file_label}"
    elif applicant:
        stem = f"{applicant}_{kind.file_label}"
    else:
        stem = kind.generic_file_name
    return f"{stem}.{fmt.extension}"
