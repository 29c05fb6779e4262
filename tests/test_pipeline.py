import asyncio
from datetime import date
from io import BytesIO
from types import SimpleNamespace

import pytest
from docx import Document as load_docx

from materials.activity_log import ActivityLog
from materials.agent import GenerationClient
from materials.config import GenerationConfig
from materials.document import DocumentFormat, DocumentKind
from materials.errors import EmptyContentError, GenerationError, InputError
from materials.pipeline import GeneratedMaterials, generate_materials, prepare_download, run_generation

COVER = "COMPANY_NAME: Letter Co\nOctober 1, 2024\n\nDear Hiring Team,"
RESUME = "APPLICANT_NAME: Jane Doe\nCOMPANY_NAME: Acme Corp\n**EXPERIENCE**\n* Built things"
ANSWERS = "1. Why us?\nBecause."


class FakeGenerator:
    def __init__(self, fail_on=None, resume=RESUME, cover=COVER):
        self.fail_on = fail_on
        self.responses = {"Cover Letter": cover, "Resume": resume, "Answers": ANSWERS}
        self.calls = []

    async def generate(self, prompt, use_grounding=None, prompt_type="Generic"):
        self.calls.append((prompt_type, use_grounding))
        await asyncio.sleep(0)
        if prompt_type == self.fail_on:
            raise GenerationError(f"{prompt_type} failed")
        return self.responses[prompt_type]


def test_generate_materials_strips_prefixes():
    gen = FakeGenerator()
    result = asyncio.run(generate_materials("resume", "jd", ["Why us?"], gen, ActivityLog(), date(2024, 10, 1)))
    assert result.cover_letter.startswith("October 1, 2024")
    assert result.resume.startswith("**EXPERIENCE**")
    assert result.answers == ANSWERS
    assert result.applicant_name == "Jane_Doe"
    # the resume's company wins
    assert result.company_name == "Acme_Corp"


def test_answers_only_requested_with_questions():
    gen = FakeGenerator()
    result = asyncio.run(generate_materials("resume", "jd", ["", "   "], gen, ActivityLog()))
    assert result.answers == ""
    assert [c[0] for c in gen.calls] == ["Cover Letter", "Resume"]


def test_all_calls_use_the_configured_grounding():
    gen = FakeGenerator()
    asyncio.run(generate_materials("resume", "jd", ["Q?"], gen, ActivityLog()))
    # None defers to GenerationConfig.use_grounding inside the client
    assert gen.calls == [("Cover Letter", None), ("Resume", None), ("Answers", None)]


def test_answers_call_is_grounded_when_config_enables_it():
    grounded = []

    class Responses:
        async def create(self, **kwargs):
            grounded.append(kwargs["input"])
            text = "COMPANY_NAME: Acme\nAPPLICANT_NAME: Jane\nBody"
            return SimpleNamespace(output=[], output_text=text)

    fake = SimpleNamespace(chat=SimpleNamespace(completions=None), responses=Responses())
    log = ActivityLog()
    client = GenerationClient(GenerationConfig(use_grounding=True), log, client=fake)
    asyncio.run(generate_materials("resume", "jd", ["Why us?"], client, log))
    assert len(grounded) == 3
    assert any("1. Why us?" in prompt for prompt in grounded)


def test_cover_letter_company_used_when_resume_has_none():
    gen = FakeGenerator(resume="APPLICANT_NAME: Jane Doe\nCOMPANY_NAME: N/A\nBody")
    result = asyncio.run(generate_materials("resume", "jd", [], gen, ActivityLog()))
    assert result.company_name == "Letter_Co"
    assert result.resume == "Body"


def test_missing_input_raises():
    with pytest.raises(InputError):
        asyncio.run(generate_materials("", "jd", [], FakeGenerator(), ActivityLog()))
    with pytest.raises(InputError):
        asyncio.run(generate_materials("resume", "   ", [], FakeGenerator(), ActivityLog()))


def test_one_failed_call_fails_the_whole_run():
    outcome = run_generation("resume", "jd", ["Q?"], FakeGenerator(fail_on="Answers"), ActivityLog())
    assert outcome.error == "Answers failed"
    assert not outcome.ok
    assert outcome.materials == GeneratedMaterials()


def test_unexpected_error_is_wrapped():
    class Broken(FakeGenerator):
        async def generate(self, prompt, use_grounding=None, prompt_type="Generic"):
            raise RuntimeError("socket closed")

    with pytest.raises(GenerationError) as exc:
        asyncio.run(generate_materials("resume", "jd", [], Broken(), ActivityLog()))
    assert "socket closed" in exc.value.detail


def test_run_generation_success():
    outcome = run_generation("resume", "jd", [], FakeGenerator(), ActivityLog())
    assert outcome.ok
    assert outcome.materials.content_for(DocumentKind.RESUME).startswith("**EXPERIENCE**")


def test_prepare_download_docx():
    log = ActivityLog()
    rendered = prepare_download(
        "**EXPERIENCE**\n* Built things",
        DocumentKind.RESUME,
        DocumentFormat.DOCX,
        log=log,
        applicant_name="Jane_Doe",
        company_name="Acme_Corp",
        settle_delay=0,
    )
    assert rendered.file_name == "Acme_Corp_Jane_Doe_Resume.docx"
    assert rendered.mime_type == DocumentFormat.DOCX.mime_type
    assert load_docx(BytesIO(rendered.data)).paragraphs[0].text == "EXPERIENCE"
    assert log.entries()[-1].message == "DOCX generated."


def test_prepare_download_pdf_generic_name():
    rendered = prepare_download("Hello", "answers", "pdf", log=ActivityLog(), settle_delay=0)
    assert rendered.file_name == "Job_Application_Answers.pdf"
    assert rendered.data.startswith(b"%PDF")


def test_prepare_download_rejects_empty_content():
    log = ActivityLog()
    with pytest.raises(EmptyContentError):
        prepare_download("  \n ", DocumentKind.COVER_LETTER, DocumentFormat.PDF, log=log, settle_delay=0)
    assert log.entries()[-1].level == "ERROR"
