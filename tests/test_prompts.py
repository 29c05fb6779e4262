from datetime import date

from materials.prompts import (
    build_answers_prompt,
    build_cover_letter_prompt,
    build_resume_prompt,
    format_current_date,
    format_questions,
)


def test_format_current_date_has_no_zero_padding():
    assert format_current_date(date(2023, 10, 6)) == "October 6, 2023"


def test_format_questions_numbers_non_blank_lines():
    assert format_questions(["Why us?", "  ", "Salary expectations? "]) == "1. Why us?\n2. Salary expectations?"


def test_cover_letter_prompt_fills_fields():
    prompt = build_cover_letter_prompt("RESUME BODY", "JD BODY", today=date(2024, 3, 1))
    assert "RESUME BODY" in prompt
    assert "JD BODY" in prompt
    assert "Current Date: March 1, 2024" in prompt
    assert "COMPANY_NAME:" in prompt


def test_resume_prompt_requests_prefix_lines_and_markup():
    prompt = build_resume_prompt("RESUME BODY", "JD BODY")
    assert "APPLICANT_NAME:" in prompt
    assert "**EXPERIENCE**" in prompt
    assert "---" in prompt


def test_answers_prompt_lists_questions():
    prompt = build_answers_prompt("R", "J", ["Why us?"])
    assert "1. Why us?" in prompt


def test_braces_in_inputs_are_not_templated():
    prompt = build_resume_prompt("Skills: {python}", "Use {curly} braces")
    assert "{python}" in prompt
    assert "{curly}" in prompt
