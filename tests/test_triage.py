# tests/test_triage.py
# Reply parsing, the keyword fallback and TriageService, without the API.

import json

import pytest

from conftest import ScriptedLLMClient, fenced
from ticket_assistant.core import LLMException
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.domain import (
    KeywordTriage,
    TriagePromptBuilder,
    extract_json_text,
    parse_reply,
    result_from_reply,
)


# ── JSON extraction ──────────────────────────────────────────────────────────

def test_extract_json_fence():
    raw = 'Sure!\n```json\n{"a": 1}\n```\nAnything else?'
    assert extract_json_text(raw) == '{"a": 1}'


def test_extract_json_fence_is_case_insensitive():
    assert extract_json_text('```JSON\n{"a": 1}```') == '{"a": 1}'


def test_extract_plain_fence():
    assert extract_json_text('```\n{"a": 1}\n```') == '{"a": 1}'


def test_extract_unfenced_reply_is_trimmed():
    assert extract_json_text('  {"a": 1}\n') == '{"a": 1}'


DEEPLY_NESTED = pytest.param("[" * 100000 + "]" * 100000, id="deeply-nested")


@pytest.mark.parametrize("raw", ["", "   ", "not json", "[1, 2]", '"text"', DEEPLY_NESTED])
def test_parse_reply_rejects_non_objects(raw):
    with pytest.raises(ValueError):
        parse_reply(raw)


# ── Keyword fallback ─────────────────────────────────────────────────────────

def test_fallback_summary_is_first_sentence():
    result = KeywordTriage.analyze("App down", "Nothing loads. Tried twice!")
    assert result.summary == "App down"


def test_fallback_summary_with_empty_description():
    assert KeywordTriage.first_sentence("Just a title", "") == "Just a title."


def test_fallback_fields():
    result = KeywordTriage.analyze("Login broken", "The Express backend returns 500")
    assert result.priority == "medium"
    assert result.helpful_notes == "Fallback analysis: The Express backend returns 500"
    assert result.related_skills == ["Node.js"]
    assert result.is_fallback


def test_fallback_notes_use_title_without_description():
    result = KeywordTriage.analyze("Docker image fails", "")
    assert result.helpful_notes == "Fallback analysis: Docker image fails"


def test_fallback_skills_keep_rule_order():
    result = KeywordTriage.analyze(
        "Kubernetes deploy",
        "Postgres migration breaks the ReactJS frontend and mongoose models"
    )
    assert result.related_skills == ["React", "MongoDB", "SQL", "Docker"]


def test_fallback_without_keywords_has_no_skills():
    assert KeywordTriage.analyze("Billing question", "Invoice is wrong").related_skills == []


# ── Reply normalisation ──────────────────────────────────────────────────────

def test_result_from_reply_normalises_priority_and_skills():
    result = result_from_reply(
        {"summary": "s", "priority": "URGENT", "helpfulNotes": "n", "relatedSkills": "React"},
        "t", "d"
    )
    assert result.priority == "medium"
    assert result.related_skills == []


def test_result_from_reply_drops_non_string_skills():
    result = result_from_reply(
        {"summary": "s", "priority": "Low", "helpfulNotes": "n", "relatedSkills": ["SQL", 3, None, " Go "]},
        "t", "d"
    )
    assert result.priority == "low"
    assert result.related_skills == ["SQL", "Go"]


def test_result_from_reply_fills_missing_text():
    result = result_from_reply({"priority": "high"}, "Crash on save", "The app crashes. Always.")
    assert result.summary == "Crash on save"
    assert result.helpful_notes == "Fallback analysis: The app crashes. Always."
    assert not result.is_fallback


def test_prompt_contains_ticket():
    prompt = TriagePromptBuilder.build_prompt("Login broken", "Form crashes")
    assert "- Title: Login broken" in prompt
    assert "- Description: Form crashes" in prompt
    assert '"relatedSkills"' in prompt


# ── TriageService ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_analyze_uses_model_reply():
    llm = ScriptedLLMClient([fenced({
        "summary": "Checkout fails",
        "priority": "high",
        "helpfulNotes": "See https://stripe.com/docs",
        "relatedSkills": ["Node.js"],
    })])
    result = await TriageService(llm).analyze("Checkout", "Payment API times out")

    assert result.summary == "Checkout fails"
    assert result.priority == "high"
    assert result.related_skills == ["Node.js"]
    assert result.model_used == "scripted-model"
    assert not result.is_fallback

    messages = llm.calls[0]
    assert messages[0]["role"] == "system"
    assert "Payment API times out" in messages[1]["content"]


@pytest.mark.asyncio
async def test_analyze_accepts_unfenced_json():
    llm = ScriptedLLMClient([json.dumps({"summary": "x", "priority": "low", "helpfulNotes": "y", "relatedSkills": []})])
    result = await TriageService(llm).analyze("t", "d")
    assert result.priority == "low"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [LLMException("timeout"), "", "I cannot help with that", "```json\n[1]\n```", DEEPLY_NESTED]
)
async def test_analyze_falls_back_on_bad_reply(reply):
    result = await TriageService(ScriptedLLMClient([reply])).analyze("Mongo slow", "Queries take 10s")
    assert result.is_fallback
    assert result.priority == "medium"
    assert result.related_skills == ["MongoDB"]


@pytest.mark.asyncio
async def test_analyze_without_client_uses_fallback():
    service = TriageService(None)
    assert not service.model_available
    result = await service.analyze("React bug", "Button does nothing")
    assert result.is_fallback
    assert result.related_skills == ["React"]
