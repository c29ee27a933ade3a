#quizgen/services/quiz_generator.py
"""Generate a merchant's quiz questions: AI first, rule-based fallback.

Both paths are question sources with the same contract; whichever one
produced the questions, the result goes through the same merge, backfill
and cap steps before being returned to the caller for persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Any, Optional, Sequence
from dataclasses import dataclass
from quizgen.schemas import (
    CatalogSummary,
    GenerationResult,
    PriceBracket,
    ProductIn,
    Question,
    QuizStyle,
)
from quizgen.config import settings, setup_logging
from quizgen.errors import GenerationError
from quizgen.services.brackets import plan_brackets
from quizgen.services.catalog import summarize_catalog
from quizgen.services.dedup import merge_questions, normalize_key
from quizgen.services.generator import request_generated_questions
from quizgen.services.rule_based import build_rule_based_questions
from quizgen.services.validator import sanitize_questions

logger = setup_logging()


@dataclass
class GenerationContext:
    """Per-run working state. Nothing here is shared between runs."""
    summary: CatalogSummary
    brackets: List[PriceBracket]
    style: QuizStyle


@dataclass
class SourcedQuestions:
    questions: List[Question]
    source: str
    dropped_values: int = 0


class QuestionSource(ABC):
    name = "base"

    @abstractmethod
    async def produce(self, ctx: GenerationContext) -> SourcedQuestions:
        """Return questions for the catalog in ``ctx``; raise GenerationError to trigger fallback."""


class RuleBasedQuestionSource(QuestionSource):
    name = "rule_based"

    async def produce(self, ctx: GenerationContext) -> SourcedQuestions:
        questions = build_rule_based_questions(ctx.summary, ctx.brackets, ctx.style)
        return SourcedQuestions(questions=questions, source=self.name)


class GenerativeQuestionSource(QuestionSource):
    """Single OpenAI call, then closed-world sanitizing of the output."""
    name = "ai"

    def __init__(self, client: Optional[Any] = None):
        self.client = client

    async def produce(self, ctx: GenerationContext) -> SourcedQuestions:
        raw = await request_generated_questions(ctx.summary, ctx.brackets, ctx.style, client=self.client)
        report = sanitize_questions(raw, ctx.summary.vocabulary, ctx.summary.prices_by_type)
        if not report.questions:
            raise GenerationError("Model output contained no usable questions")
        return SourcedQuestions(
            questions=report.questions,
            source=self.name,
            dropped_values=report.dropped_values,
        )


def backfill_questions(
    questions: Sequence[Question],
    supplements: Sequence[Question],
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> List[Question]:
    """Append supplement questions with unseen merge keys until ``minimum`` is met.

    Backfilled questions are ordered after the existing ones.
    """
    minimum = settings.min_questions if minimum is None else minimum
    maximum = settings.max_questions if maximum is None else maximum

    out = list(questions)
    seen = {normalize_key(q.text) for q in out}
    next_order = max((q.order for q in out), default=-1) + 1
    for supplement in supplements:
        if len(out) >= minimum:
            break
        key = normalize_key(supplement.text)
        if key in seen:
            continue
        seen.add(key)
        out.append(supplement.model_copy(update={"order": next_order}))
        next_order += 1
    return out[:maximum]


def finalize_questions(questions: Sequence[Question], ctx: GenerationContext) -> List[Question]:
    merged = merge_questions(questions)
    if len(merged) < settings.min_questions:
        supplements = build_rule_based_questions(ctx.summary, ctx.brackets, ctx.style)
        merged = backfill_questions(merged, supplements)
    capped = merged[: settings.max_questions]
    # Renumber so order values are unique within the run
    return [q.model_copy(update={"order": i}) for i, q in enumerate(capped)]


async def generate_quiz_questions(
    products: Sequence[ProductIn],
    style: QuizStyle = QuizStyle.PROFESSIONAL,
    client: Optional[Any] = None,
    use_ai: Optional[bool] = None,
) -> GenerationResult:
    """Generate quiz questions for one merchant's catalog.

    Raises EmptyCatalogError before any work if ``products`` is empty. Any
    failure of the generative path is logged and answered with rule-based
    questions; it is never raised.
    """
    summary = summarize_catalog(products)
    brackets = plan_brackets(summary.prices, summary.prices_by_type, summary.vocabulary.types)
    ctx = GenerationContext(summary=summary, brackets=brackets, style=style)

    use_ai = settings.ai_generation_enabled if use_ai is None else use_ai
    sourced: Optional[SourcedQuestions] = None
    if use_ai:
        try:
            sourced = await GenerativeQuestionSource(client).produce(ctx)
        except GenerationError as exc:
            logger.warning("AI question generation failed, using rule-based questions: %s", exc)
    if sourced is None:
        sourced = await RuleBasedQuestionSource().produce(ctx)

    questions = finalize_questions(sourced.questions, ctx)
    logger.info(
        "Generated %d questions from %d products (source=%s, style=%s)",
        len(questions),
        len(summary.products),
        sourced.source,
        style.value,
    )
    return GenerationResult(
        questions=questions,
        source=sourced.source,
        product_count=len(summary.products),
        dropped_values=sourced.dropped_values,
    )
