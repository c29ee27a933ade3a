"""Budget bracket planning.

Brackets are expressed relative to the catalog's average price so that the
boundaries follow each merchant's own pricing:

    [0, 0.5*avg)  [0.5*avg, avg)  [avg, 1.5*avg)  [1.5*avg, inf)

A product type is eligible for a bracket when its own [min, max] price range
overlaps the bracket, with an inclusive test on both edges:
``not (tmax < bmin or tmin > bmax)``.
"""
from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence

from quizgen.config import settings
from quizgen.schemas import PriceBracket, PriceRange

BRACKET_MULTIPLIERS = (0.0, 0.5, 1.0, 1.5)
MAX_TYPES_PER_BRACKET = 3
LABEL_DECIMALS = (0, 2, 4, 6)


def type_price_range(prices: Optional[Sequence[float]]) -> Optional[PriceRange]:
    if not prices:
        return None
    return PriceRange(min=min(prices), max=max(prices))


def overlaps_bounds(price_range: PriceRange, low: Optional[float], high: Optional[float]) -> bool:
    bmin = low if low is not None else 0.0
    bmax = high if high is not None else math.inf
    return not (price_range.max < bmin or price_range.min > bmax)


def overlaps(price_range: PriceRange, bracket: PriceBracket) -> bool:
    return overlaps_bounds(price_range, bracket.min, bracket.max)


def _bounds(average: float) -> List[PriceBracket]:
    brackets: List[PriceBracket] = []
    for index, multiplier in enumerate(BRACKET_MULTIPLIERS):
        upper: Optional[float] = None
        if index + 1 < len(BRACKET_MULTIPLIERS):
            upper = average * BRACKET_MULTIPLIERS[index + 1]
        brackets.append(PriceBracket(index=index, min=average * multiplier, max=upper))
    _distinct_labels(brackets)
    return brackets


def _distinct_labels(brackets: List[PriceBracket]) -> None:
    """Raise label precision until no two brackets share a label."""
    for decimals in LABEL_DECIMALS:
        for bracket in brackets:
            bracket.decimals = decimals
        if len({b.label for b in brackets}) == len(brackets):
            return


def eligible_types(
    bracket: PriceBracket,
    prices_by_type: Dict[str, List[float]],
    types: Sequence[str],
) -> List[str]:
    """Types whose price range overlaps the bracket, in catalog order, at most 3."""
    out: List[str] = []
    for type_name in types:
        price_range = type_price_range(prices_by_type.get(type_name))
        if price_range is None or not overlaps(price_range, bracket):
            continue
        out.append(type_name)
        if len(out) >= MAX_TYPES_PER_BRACKET:
            break
    return out


def plan_brackets(
    prices: Sequence[float],
    prices_by_type: Dict[str, List[float]],
    types: Optional[Sequence[str]] = None,
) -> List[PriceBracket]:
    """Derive the four budget brackets and their eligible product types.

    With no usable prices, falls back to brackets around
    ``settings.default_average_price`` with no type narrowing. Never raises.
    """
    if not prices:
        return _bounds(settings.default_average_price)

    average = sum(prices) / len(prices)
    ordered_types = list(types) if types is not None else list(prices_by_type.keys())

    brackets = _bounds(average)
    for bracket in brackets:
        bracket.eligible_types = eligible_types(bracket, prices_by_type, ordered_types)
    return brackets
