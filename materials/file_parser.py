import logging
from io import BytesIO
from pathlib import PurePath
from typing import Optional

from docx import Document as load_docx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .activity_log import ActivityLog
from .errors import ParseError

logger = logging.getLogger(__name__)

MODULE = "FileParser"
MAX_UPLOAD_MB = 5

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"

_MIME_TO_TYPE = {PDF_MIME: "pdf", DOCX_MIME: "docx", TEXT_MIME: "txt"}
_EXT_TO_TYPE = {".pdf": "pdf", ".docx": "docx", ".txt": "txt"}


def resolve_file_type(name: str, mime_type: Optional[str] = None) -> Optional[str]:
    """MIME type first, then the file extension."""
    if mime_type and mime_type.lower() in _MIME_TO_TYPE:
        return _MIME_TO_TYPE[mime_type.lower()]
    return _EXT_TO_TYPE.get(PurePath(name or "").suffix.lower())


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(BytesIO(data))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def _docx_text(data: bytes) -> str:
    doc = load_docx(BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def _txt_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


_READERS = {"pdf": _pdf_text, "docx": _docx_text, "txt": _txt_text}


def parse_file(
    name: str,
    data: bytes,
    mime_type: Optional[str] = None,
    log: Optional[ActivityLog] = None,
    max_mb: float = MAX_UPLOAD_MB,
) -> str:
    def note(message, details=None, level="INFO"):
        if log is not None:
            log.log(MODULE, "parse_file", message, details, level)
        else:
            logger.log(logging.ERROR if level == "ERROR" else logging.INFO, message)

    size = len(data or b"")
    note("Parsing uploaded file.", {"name": name, "mimeType": mime_type, "size": size})

    if size > max_mb * 1024 * 1024:
        note("File too large.", {"name": name, "size": size, "maxMb": max_mb}, "ERROR")
        raise ParseError(f"File is too large. Maximum size is {max_mb:g} MB.")

    file_type = resolve_file_type(name, mime_type)
    if file_type is None:
        note("Unsupported file type.", {"name": name, "mimeType": mime_type}, "ERROR")
        raise ParseError("Unsupported file type. Please upload a PDF, DOCX or TXT file.")

    try:
        text = _READERS[file_type](data or b"")
    except PdfReadError as e:
        note("Failed to read PDF file.", {"name": name, "error": str(e)}, "ERROR")
        raise ParseError(f"Could not read the PDF file: {e}") from e
    except Exception as e:
        # python-docx surfaces corrupt archives as zipfile/lxml errors
        note(f"Failed to read {file_type.upper()} file.", {"name": name, "error": str(e)}, "ERROR")
        raise ParseError(f"Could not read the {file_type.upper()} file.") from e

    text = text.strip()
    note("File parsed.", {"name": name, "type": file_type, "length": len(text)})
    return text
