"""Reduce a merchant's product list to the vocabulary and price distributions
that question generation works from."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from quizgen.errors import EmptyCatalogError
from quizgen.schemas import CatalogSummary, ProductIn, ProductSummary, Vocabulary


def parse_price(value: Any) -> Optional[float]:
    """Return a positive finite price, or None if the value is unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _append_unique(target: List[str], seen: set, value: Optional[str]) -> None:
    if value is not None and value not in seen:
        seen.add(value)
        target.append(value)


def summarize_catalog(products: Sequence[ProductIn]) -> CatalogSummary:
    if not products:
        raise EmptyCatalogError()

    summaries: List[ProductSummary] = []
    tags: List[str] = []
    types: List[str] = []
    vendors: List[str] = []
    seen_tags: set = set()
    seen_types: set = set()
    seen_vendors: set = set()
    prices: List[float] = []
    prices_by_type: Dict[str, List[float]] = {}

    for product in products:
        product_tags = [t for t in (_clean(t) for t in (product.tags or [])) if t]
        product_type = _clean(product.product_type)
        price = parse_price(product.price)

        for tag in product_tags:
            _append_unique(tags, seen_tags, tag)
        _append_unique(types, seen_types, product_type)
        _append_unique(vendors, seen_vendors, _clean(product.vendor))

        if price is not None:
            prices.append(price)
            if product_type is not None:
                prices_by_type.setdefault(product_type, []).append(price)

        summaries.append(
            ProductSummary(
                id=product.id,
                title=product.title,
                type=product_type,
                tags=product_tags,
                price=price,
            )
        )

    return CatalogSummary(
        products=summaries,
        vocabulary=Vocabulary(tags=tags, types=types),
        vendors=vendors,
        prices=prices,
        prices_by_type=prices_by_type,
    )
