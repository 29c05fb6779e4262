from enum import Enum
from typing import Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated


class DocumentKind(str, Enum):
    COVER_LETTER = "cover_letter"
    RESUME = "resume"
    ANSWERS = "answers"

    @property
    def display_name(self) -> str:
        return _KIND_DISPLAY_NAMES[self]

    @property
    def file_label(self) -> str:
        return _KIND_FILE_LABELS[self]

    @property
    def generic_file_name(self) -> str:
        return _KIND_GENERIC_NAMES[self]

    @property
    def justified(self) -> bool:
        # Letters and resumes read as running prose; answers stay ragged-right.
        return self in (DocumentKind.COVER_LETTER, DocumentKind.RESUME)


_KIND_DISPLAY_NAMES = {
    DocumentKind.COVER_LETTER: "Cover Letter",
    DocumentKind.RESUME: "Improved Resume",
    DocumentKind.ANSWERS: "Job Application Answers",
}

_KIND_FILE_LABELS = {
    DocumentKind.COVER_LETTER: "Cover_Letter",
    DocumentKind.RESUME: "Resume",
    DocumentKind.ANSWERS: "Answers",
}

_KIND_GENERIC_NAMES = {
    DocumentKind.COVER_LETTER: "Cover_Letter",
    DocumentKind.RESUME: "Improved_Resume",
    DocumentKind.ANSWERS: "Job_Application_Answers",
}


class DocumentFormat(str, Enum):
    DOCX = "docx"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def mime_type(self) -> str:
        if self is DocumentFormat.DOCX:
            return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        return "application/pdf"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Run(_Frozen):
    """Smallest styled unit of text. Bold state is already resolved."""

    text: str
    emphasis: bool = False
    hyperlink: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _no_unresolved_markers(cls, value: str) -> str:
        if not value:
            raise ValueError("run text must not be empty")
        if "**" in value:
            raise ValueError("run text still contains a bold marker")
        return value


class Header(_Frozen):
    kind: Literal["header"] = "header"
    label: str

    @field_validator("label")
    @classmethod
    def _upper_case(cls, value: str) -> str:
        if not value.strip() or value != value.upper():
            raise ValueError(f"header label must be upper-case, got {value!r}")
        return value


class Separator(_Frozen):
    kind: Literal["separator"] = "separator"


class Bullet(_Frozen):
    kind: Literal["bullet"] = "bullet"
    level: int = Field(default=0, ge=0)
    runs: Tuple[Run, ...] = ()


class Paragraph(_Frozen):
    kind: Literal["paragraph"] = "paragraph"
    runs: Tuple[Run, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)


class BlankLine(_Frozen):
    kind: Literal["blank"] = "blank"


Block = Annotated[
    Union[Header, Separator, Bullet, Paragraph, BlankLine],
    Field(discriminator="kind"),
]


class Document(_Frozen):
    """Ordered blocks for one material; input line order is the only structure."""

    blocks: Tuple[Block, ...] = ()

    def count(self, block_type: Type[BaseModel]) -> int:
        return sum(1 for block in self.blocks if isinstance(block, block_type))
