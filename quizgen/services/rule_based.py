"""Deterministic quiz questions built from catalog vocabulary and price brackets.

Used as the fallback whenever the generative path fails, and as the supply of
backfill questions when the generative path returns too few.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from quizgen.config import settings
from quizgen.schemas import (
    CatalogSummary,
    PriceBracket,
    PriceRange,
    Question,
    QuestionOption,
    QuizStyle,
)
from quizgen.services.brackets import type_price_range

STYLE_KEYWORDS = ("modern", "classic", "vintage", "minimal", "bold", "natural", "organic")
MAX_CATEGORY_OPTIONS = 6
MAX_STYLE_OPTIONS = 4

# Fixed archetype positions; omitted archetypes leave gaps in `order`.
ORDER_USE_CASE = 0
ORDER_BUDGET = 1
ORDER_CATEGORY = 2
ORDER_STYLE = 3
ORDER_FEATURES = 4

USE_CASE_TEXT = {
    QuizStyle.FUN: "What's your vibe today?",
    QuizStyle.PROFESSIONAL: "What are you looking for?",
    QuizStyle.DETAILED: "What will you mainly be using your purchase for?",
}

STYLE_TEXT = {
    QuizStyle.FUN: "Pick your aesthetic!",
    QuizStyle.PROFESSIONAL: "What style appeals to you?",
    QuizStyle.DETAILED: "Which of these styles best matches your personal taste?",
}

BUDGET_TAGS = (
    ["budget", "affordable"],
    [],
    ["premium"],
    ["luxury", "premium", "high-end"],
)


def _option(text: str, tags: Optional[List[str]] = None, types: Optional[List[str]] = None, **extra) -> QuestionOption:
    return QuestionOption(
        text=text,
        matching_tags=list(tags or []),
        matching_types=list(types or []),
        **extra,
    )


def use_case_question(style: QuizStyle) -> Question:
    return Question(
        text=USE_CASE_TEXT[style],
        order=ORDER_USE_CASE,
        options=[
            _option("Something for everyday use", ["daily", "essential", "basic"]),
            _option("A special occasion item", ["luxury", "premium", "special"]),
            _option("A gift for someone", ["gift", "present"]),
            _option("Something to treat myself", ["indulgent", "premium", "luxury"]),
        ],
    )


def budget_question(brackets: Sequence[PriceBracket]) -> Question:
    options = []
    for bracket in brackets:
        tags = BUDGET_TAGS[bracket.index] if bracket.index < len(BUDGET_TAGS) else []
        options.append(
            _option(
                bracket.label,
                tags,
                bracket.eligible_types,
                budget_min=bracket.min,
                budget_max=bracket.max,
            )
        )
    return Question(text="What's your budget?", order=ORDER_BUDGET, options=options)


def category_question(types: Sequence[str], prices_by_type: Dict[str, List[float]]) -> Question:
    options = []
    for type_name in types[:MAX_CATEGORY_OPTIONS]:
        price_range = type_price_range(prices_by_type.get(type_name)) or PriceRange(min=0, max=0)
        options.append(_option(type_name, types=[type_name], price_range=price_range))
    return Question(text="Which category interests you most?", order=ORDER_CATEGORY, options=options)


def style_tags(tags: Sequence[str]) -> List[str]:
    """Tags whose text contains one of the style keywords (case-insensitive)."""
    return [tag for tag in tags if any(keyword in tag.lower() for keyword in STYLE_KEYWORDS)]


def style_question(matching: Sequence[str], style: QuizStyle) -> Question:
    return Question(
        text=STYLE_TEXT[style],
        order=ORDER_STYLE,
        options=[_option(tag[:1].upper() + tag[1:], [tag]) for tag in matching[:MAX_STYLE_OPTIONS]],
    )


def feature_question() -> Question:
    return Question(
        text="What's most important to you?",
        order=ORDER_FEATURES,
        options=[
            _option("Quality and durability", ["durable", "quality", "premium"]),
            _option("Eco-friendly and sustainable", ["eco", "sustainable", "organic", "natural"]),
            _option("Latest trends and styles", ["trending", "new", "modern"]),
            _option("Best value for money", ["value", "affordable", "budget"]),
        ],
    )


def build_rule_based_questions(
    summary: CatalogSummary,
    brackets: Sequence[PriceBracket],
    style: QuizStyle = QuizStyle.PROFESSIONAL,
) -> List[Question]:
    vocabulary = summary.vocabulary
    questions: List[Question] = [use_case_question(style)]

    if summary.prices and brackets:
        questions.append(budget_question(brackets))

    if len(vocabulary.types) >= 2:
        questions.append(category_question(vocabulary.types, summary.prices_by_type))

    matching = style_tags(vocabulary.tags)
    if len(matching) >= 2:
        questions.append(style_question(matching, style))

    questions.append(feature_question())

    return questions[: settings.max_questions]
