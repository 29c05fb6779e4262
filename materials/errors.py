from typing import Optional


class MaterialsError(Exception):
    """Base class for failures surfaced to the user as a single message."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InputError(MaterialsError):
    """Required input (resume text or job description) is missing."""


class ParseError(MaterialsError):
    """An uploaded resume could not be turned into text."""


class GenerationError(MaterialsError):
    """The generative-text API call failed or returned nothing usable."""


class EmptyContentError(MaterialsError):
    """A download was requested for a material that has no content."""


class RenderError(MaterialsError):
    """
    Building a DOCX or PDF file failed.

    Attributes:
        format: Output format that failed ("docx" or "pdf")
        original_error: The exception raised by the underlying library
    """

    def __init__(
        self,
        detail: str,
        format: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(detail)
        self.format = format
        self.original_error = original_error
