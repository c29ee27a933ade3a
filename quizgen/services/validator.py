"""Validate and sanitize raw model output against the catalog vocabulary.

Nothing here raises: missing fields get safe defaults and any tag or type the
model invented is dropped, so only known vocabulary reaches storage.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from quizgen.config import setup_logging
from quizgen.schemas import PriceRange, Question, QuestionOption, QuestionType, Vocabulary
from quizgen.services.brackets import overlaps_bounds, type_price_range

logger = setup_logging()

_QUESTION_TYPES = {t.value for t in QuestionType}


@dataclass
class SanitizeReport:
    questions: List[Question] = field(default_factory=list)
    dropped_values: int = 0
    dropped_questions: int = 0


def _number(value: Any) -> Optional[float]:
    """Finite float for a JSON number; None for bools, NaN/inf and values too large for a float."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _restrict(values: Any, allowed: Sequence[str]) -> Tuple[List[str], int]:
    """Keep only values in the allow-list; returns (kept, dropped count).

    An exact match wins; otherwise membership is case-insensitive, the first
    allow-list spelling is emitted.
    """
    if not isinstance(values, list):
        return [], 0
    exact = set(allowed)
    canonical: Dict[str, str] = {}
    for a in allowed:
        canonical.setdefault(a.lower(), a)
    kept: List[str] = []
    dropped = 0
    for value in values:
        match = None
        if isinstance(value, str):
            value = value.strip()
            match = value if value in exact else canonical.get(value.lower())
        if match is None:
            dropped += 1
        elif match not in kept:
            kept.append(match)
    return kept, dropped


def _price_range(value: Any) -> Optional[PriceRange]:
    if not isinstance(value, dict):
        return None
    low, high = _number(value.get("min")), _number(value.get("max"))
    if low is None or high is None:
        return None
    return PriceRange(min=low, max=high)


def _priced_within(
    types: List[str],
    budget_min: Optional[float],
    budget_max: Optional[float],
    prices_by_type: Dict[str, List[float]],
) -> Tuple[List[str], int]:
    """Narrow a budget option's types to those priced inside its bounds."""
    kept = []
    for type_name in types:
        price_range = type_price_range(prices_by_type.get(type_name))
        if price_range is not None and overlaps_bounds(price_range, budget_min, budget_max):
            kept.append(type_name)
    return kept, len(types) - len(kept)


def sanitize_option(
    raw: Dict[str, Any],
    vocabulary: Vocabulary,
    prices_by_type: Optional[Dict[str, List[float]]] = None,
) -> Tuple[QuestionOption, int]:
    tags, dropped_tags = _restrict(raw.get("matchingTags"), vocabulary.tags)
    types, dropped_types = _restrict(raw.get("matchingTypes"), vocabulary.types)
    budget_min = _number(raw.get("budgetMin"))
    budget_max = _number(raw.get("budgetMax"))
    if prices_by_type is not None and (budget_min is not None or budget_max is not None):
        types, unpriced = _priced_within(types, budget_min, budget_max, prices_by_type)
        dropped_types += unpriced
    option = QuestionOption(
        text=_text(raw.get("text"), "Option"),
        matching_tags=tags,
        matching_types=types,
        budget_min=budget_min,
        budget_max=budget_max,
        price_range=_price_range(raw.get("priceRange")),
    )
    return option, dropped_tags + dropped_types


def sanitize_questions(
    raw_questions: Sequence[Any],
    vocabulary: Vocabulary,
    prices_by_type: Optional[Dict[str, List[float]]] = None,
) -> SanitizeReport:
    """Coerce raw model questions into Question models.

    When ``prices_by_type`` is given, options carrying budget bounds only keep
    the types whose price range overlaps those bounds.
    """
    report = SanitizeReport()

    for index, raw in enumerate(raw_questions):
        if not isinstance(raw, dict):
            report.dropped_questions += 1
            continue

        options: List[QuestionOption] = []
        raw_options = raw.get("options")
        for raw_option in raw_options if isinstance(raw_options, list) else []:
            if not isinstance(raw_option, dict):
                continue
            option, dropped = sanitize_option(raw_option, vocabulary, prices_by_type)
            report.dropped_values += dropped
            options.append(option)

        if not options:
            report.dropped_questions += 1
            continue

        q_type = raw.get("type")
        order = _number(raw.get("order"))
        rules = raw.get("conditionalRules")
        report.questions.append(
            Question(
                text=_text(raw.get("text"), f"Question {index + 1}"),
                type=q_type if isinstance(q_type, str) and q_type in _QUESTION_TYPES else QuestionType.MULTIPLE_CHOICE.value,
                order=int(order) if order is not None and order >= 0 else index,
                conditional_rules=rules if isinstance(rules, dict) else None,
                options=options,
            )
        )

    if report.dropped_values or report.dropped_questions:
        logger.info(
            "Sanitized model output: dropped %d out-of-vocabulary values and %d unusable questions",
            report.dropped_values,
            report.dropped_questions,
        )
    return report
