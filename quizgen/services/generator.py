#quizgen/services/generator.py
"""Request quiz questions from OpenAI for one catalog summary."""

from typing import List, Any, Optional, Sequence
import asyncio
import json
from quizgen.schemas import CatalogSummary, PriceBracket, QuizStyle
from quizgen.config import settings, get_openai_async_client, setup_logging
from quizgen.errors import GenerationError
from quizgen import prompts

logger = setup_logging()


def parse_questions_payload(content: str) -> List[Any]:
    """Extract the raw questions list from model output.

    Accepts ``{"questions": [...]}`` or a bare JSON array.
    """
    data: Any
    try:
        # Content is expected to be a single JSON object as instructed
        data = json.loads(content)
    except json.JSONDecodeError:
        # Heuristic: try to find the first and last braces
        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end == -1 or end <= start:
            raise GenerationError("No JSON object found in model output")
        try:
            data = json.loads(content[start : end + 1])
        except json.JSONDecodeError as exc:
            raise GenerationError("Failed to parse JSON after brace extraction") from exc

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        return data["questions"]
    raise GenerationError(f"Unexpected response shape: {type(data).__name__}")


async def request_generated_questions(
    summary: CatalogSummary,
    brackets: Sequence[PriceBracket],
    style: QuizStyle,
    client: Optional[Any] = None,
) -> List[Any]:
    """Make exactly one model call and return the raw (unvalidated) questions.

    Raises GenerationError for every failure; callers fall back to rule-based questions.
    """
    if client is None:
        client = get_openai_async_client()
    if client is None:
        raise GenerationError("OPENAI_API_KEY is not set in environment.")

    sys_prompt = prompts.system_prompt(style)
    user_prompt = prompts.user_prompt_for_catalog(
        summary,
        brackets,
        style,
        min_questions=settings.min_questions,
        max_questions=settings.max_questions,
    )

    try:
        resp = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": sys_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
                response_format={"type": "json_object"},
            ),
            timeout=settings.generation_timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        raise GenerationError(
            f"LLM call timed out after {settings.generation_timeout_seconds}s"
        ) from exc
    except Exception as exc:
        raise GenerationError(f"LLM call failed: {exc}") from exc

    # Guard against malformed SDK responses
    if not getattr(resp, "choices", None):
        raise GenerationError("Empty response (no choices)")
    message = getattr(resp.choices[0], "message", None)
    content = (getattr(message, "content", None) or "").strip()
    if not content:
        raise GenerationError("Empty message content")

    logger.debug("LLM raw output: %s", content)
    return parse_questions_payload(content)
