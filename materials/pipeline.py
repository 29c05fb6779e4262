"""
Generation and download orchestration.

generate_materials() fans the three prompts out concurrently and joins them:
either every call succeeds or the whole run fails with GenerationError.
prepare_download() turns one generated material into a named DOCX or PDF file.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Optional, Protocol, Sequence

from pydantic import BaseModel

from .activity_log import ActivityLog
from .document import DocumentFormat, DocumentKind
from .errors import EmptyContentError, GenerationError, InputError, MaterialsError, RenderError
from .extract import APPLICANT_NAME, COMPANY_NAME, strip_prefixes
from .filenames import derive_file_name, sanitize_for_filename
from .markup import tokenize
from .pdf_render import render_pdf
from .prompts import build_answers_prompt, build_cover_letter_prompt, build_resume_prompt, clean_questions
from .render import render_docx

MODULE = "DocGen"

# Delay before rendering, carried over from the browser download flow.
DOWNLOAD_SETTLE_DELAY = 0.1


class TextGenerator(Protocol):
    def generate(self, prompt: str, use_grounding: Optional[bool] = None, prompt_type: str = "Generic") -> Awaitable[str]:
        ...


@dataclass(frozen=True)
class RenderedFile:
    file_name: str
    data: bytes
    mime_type: str
    kind: DocumentKind
    format: DocumentFormat


class GeneratedMaterials(BaseModel):
    cover_letter: str = ""
    resume: str = ""
    answers: str = ""
    applicant_name: Optional[str] = None
    company_name: Optional[str] = None

    def content_for(self, kind: DocumentKind) -> str:
        return {
            DocumentKind.COVER_LETTER: self.cover_letter,
            DocumentKind.RESUME: self.resume,
            DocumentKind.ANSWERS: self.answers,
        }[DocumentKind(kind)]


@dataclass
class GenerationOutcome:
    materials: GeneratedMaterials
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def prepare_download(
    content: str,
    kind: DocumentKind,
    fmt: DocumentFormat,
    *,
    log: ActivityLog,
    applicant_name: Optional[str] = None,
    company_name: Optional[str] = None,
    settle_delay: float = DOWNLOAD_SETTLE_DELAY,
) -> RenderedFile:
    kind = DocumentKind(kind)
    fmt = DocumentFormat(fmt)
    file_name = derive_file_name(kind, fmt, applicant_name, company_name)

    if not content or not content.strip():
        log.error(MODULE, "prepare_download", f"No content for {kind.display_name}.", {"format": fmt.value})
        raise EmptyContentError(f"No content available for {kind.display_name}.")

    if settle_delay > 0:
        time.sleep(settle_delay)

    log.info(MODULE, "prepare_download", f"Starting {fmt.value.upper()} generation.", {
        "kind": kind.value,
        "fileName": file_name,
        "contentLength": len(content),
    })
    try:
        document = tokenize(content)
        if fmt is DocumentFormat.DOCX:
            data = render_docx(document, kind)
        else:
            data = render_pdf(document, kind, title=kind.display_name)
    except RenderError as e:
        log.error(MODULE, "prepare_download", f"{fmt.value.upper()} generation failed.", {
            "fileName": file_name,
            "error": e.detail,
            "cause": str(e.original_error) if e.original_error else None,
        })
        raise

    log.info(MODULE, "prepare_download", f"{fmt.value.upper()} generated.", {"fileName": file_name, "bytes": len(data)})
    return RenderedFile(file_name=file_name, data=data, mime_type=fmt.mime_type, kind=kind, format=fmt)


async def generate_materials(
    resume_text: str,
    job_description: str,
    questions: Sequence[str],
    generator: TextGenerator,
    log: ActivityLog,
    today: Optional[date] = None,
) -> GeneratedMaterials:
    if not (resume_text or "").strip() or not (job_description or "").strip():
        log.error("App", "generate_materials", "Missing resume or job description.")
        raise InputError("Please provide both your resume and the job description.")

    questions = clean_questions(questions)
    calls = [
        generator.generate(build_cover_letter_prompt(resume_text, job_description, today), prompt_type="Cover Letter"),
        generator.generate(build_resume_prompt(resume_text, job_description), prompt_type="Resume"),
    ]
    if questions:
        calls.append(generator.generate(
            build_answers_prompt(resume_text, job_description, questions),
            prompt_type="Answers",
        ))

    log.info("App", "generate_materials", "Starting generation.", {"questionCount": len(questions)})
    try:
        results = await asyncio.gather(*calls)
    except MaterialsError as e:
        log.error("App", "generate_materials", "Generation failed.", {"error": e.detail})
        raise GenerationError(e.detail) from e
    except Exception as e:
        log.error("App", "generate_materials", "Generation failed.", {"error": str(e)})
        raise GenerationError(f"An unexpected error occurred: {e}") from e

    cover_values, cover_letter = strip_prefixes(results[0], [COMPANY_NAME])
    resume_values, resume = strip_prefixes(results[1], [APPLICANT_NAME, COMPANY_NAME])
    answers = results[2].strip() if questions else ""

    company = resume_values[COMPANY_NAME] or cover_values[COMPANY_NAME]
    materials = GeneratedMaterials(
        cover_letter=cover_letter,
        resume=resume,
        answers=answers,
        applicant_name=sanitize_for_filename(resume_values[APPLICANT_NAME]),
        company_name=sanitize_for_filename(company),
    )
    log.info("App", "generate_materials", "Generation complete.", {
        "applicantName": materials.applicant_name,
        "companyName": materials.company_name,
        "hasAnswers": bool(answers),
    })
    return materials


def run_generation(
    resume_text: str,
    job_description: str,
    questions: Sequence[str],
    generator: TextGenerator,
    log: ActivityLog,
    today: Optional[date] = None,
) -> GenerationOutcome:
    """Synchronous entry point; a failure yields empty materials and the message."""
    try:
        materials = asyncio.run(generate_materials(resume_text, job_description, questions, generator, log, today))
    except MaterialsError as e:
        return GenerationOutcome(materials=GeneratedMaterials(), error=e.detail)
    return GenerationOutcome(materials=materials)
