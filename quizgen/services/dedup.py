"""Merge questions (and options) whose text differs only by case or whitespace."""
from __future__ import annotations

import re
from typing import Dict, List, Sequence

from quizgen.schemas import Question, QuestionOption

_WS_RE = re.compile(r"\s+")


def normalize_key(text: str) -> str:
    return _WS_RE.sub(" ", (text or "").lower()).strip()


def _union(first: Sequence[str], second: Sequence[str]) -> List[str]:
    out = list(first)
    for value in second:
        if value not in out:
            out.append(value)
    return out


def merge_option(existing: QuestionOption, incoming: QuestionOption) -> QuestionOption:
    """Union matching sets; for budget bounds the first non-null value wins."""
    return existing.model_copy(
        update={
            "matching_tags": _union(existing.matching_tags, incoming.matching_tags),
            "matching_types": _union(existing.matching_types, incoming.matching_types),
            "budget_min": existing.budget_min if existing.budget_min is not None else incoming.budget_min,
            "budget_max": existing.budget_max if existing.budget_max is not None else incoming.budget_max,
            "price_range": existing.price_range if existing.price_range is not None else incoming.price_range,
        }
    )


def merge_options(existing: Sequence[QuestionOption], incoming: Sequence[QuestionOption]) -> List[QuestionOption]:
    """Fold ``incoming`` into ``existing``; new option texts are appended in order."""
    merged: Dict[str, QuestionOption] = {}
    for option in list(existing) + list(incoming):
        key = normalize_key(option.text)
        merged[key] = merge_option(merged[key], option) if key in merged else option
    return list(merged.values())


def merge_questions(questions: Sequence[Question]) -> List[Question]:
    """Collapse questions sharing a merge key and sort by first-registered order.

    Ties on ``order`` keep first-seen order.
    """
    registry: Dict[str, Question] = {}
    for question in questions:
        key = normalize_key(question.text)
        if key not in registry:
            registry[key] = question.model_copy(update={"options": merge_options([], question.options)})
            continue
        current = registry[key]
        registry[key] = current.model_copy(
            update={"options": merge_options(current.options, question.options)}
        )
    return sorted(registry.values(), key=lambda q: q.order)
