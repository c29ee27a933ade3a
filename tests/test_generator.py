import pytest

from quizgen.config import settings
from quizgen.errors import GenerationError
from quizgen.schemas import QuizStyle
from quizgen.services.brackets import plan_brackets
from quizgen.services.catalog import summarize_catalog
from quizgen.services.generator import parse_questions_payload, request_generated_questions


@pytest.fixture
def ctx(winter_catalog):
    summary = summarize_catalog(winter_catalog)
    brackets = plan_brackets(summary.prices, summary.prices_by_type, summary.vocabulary.types)
    return summary, brackets


def test_parse_accepts_object_and_bare_array():
    assert parse_questions_payload('{"questions": [{"text": "a"}]}') == [{"text": "a"}]
    assert parse_questions_payload('[{"text": "b"}]') == [{"text": "b"}]


def test_parse_extracts_object_from_surrounding_text():
    assert parse_questions_payload('Sure! {"questions": []} Hope that helps') == []


@pytest.mark.parametrize("content", ["not json", '{"items": []}', '"questions"', "{broken"])
def test_parse_rejects_bad_payloads(content):
    with pytest.raises(GenerationError):
        parse_questions_payload(content)


@pytest.mark.asyncio
async def test_single_call_with_two_prompts_and_json_mode(ctx, fake_openai):
    summary, brackets = ctx
    client = fake_openai({"questions": [{"text": "Q", "options": [{"text": "A"}]}]})
    raw = await request_generated_questions(summary, brackets, QuizStyle.DETAILED, client=client)
    assert raw == [{"text": "Q", "options": [{"text": "A"}]}]

    assert len(client.completions.calls) == 1
    call = client.completions.calls[0]
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert call["response_format"] == {"type": "json_object"}
    user_prompt = call["messages"][1]["content"]
    assert "Snowboards, Mittens" in user_prompt
    assert "Under $" in user_prompt


@pytest.mark.asyncio
async def test_missing_api_key_is_recoverable(ctx):
    summary, brackets = ctx
    with pytest.raises(GenerationError):
        await request_generated_questions(summary, brackets, QuizStyle.FUN)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", None, "   "])
async def test_empty_content_is_recoverable(ctx, fake_openai, content):
    summary, brackets = ctx
    client = fake_openai()
    client.completions.content = content
    with pytest.raises(GenerationError):
        await request_generated_questions(summary, brackets, QuizStyle.FUN, client=client)


@pytest.mark.asyncio
async def test_transport_error_is_wrapped(ctx, fake_openai):
    summary, brackets = ctx
    client = fake_openai(error=ConnectionError("boom"))
    with pytest.raises(GenerationError):
        await request_generated_questions(summary, brackets, QuizStyle.FUN, client=client)


@pytest.mark.asyncio
async def test_timeout_is_wrapped(ctx, fake_openai, monkeypatch):
    summary, brackets = ctx
    monkeypatch.setattr(settings, "generation_timeout_seconds", 0.01)
    client = fake_openai({"questions": []}, delay=1.0)
    with pytest.raises(GenerationError):
        await request_generated_questions(summary, brackets, QuizStyle.FUN, client=client)
