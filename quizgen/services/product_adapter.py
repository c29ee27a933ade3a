"""Adapter to map Shopify-like product dicts into ProductIn schema.

- Accept both REST (product_type, variants: [...]) and GraphQL node
  (productType, variants.edges[].node) shapes
- Strip HTML to compact description text
- Take price from the FIRST variant only, kept as the raw string
- Tags may be a list or a comma-separated string
- Pass through vendor and product type
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional
import re
import html

from quizgen.schemas import ProductIn

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def _html_to_text(s: Optional[str], max_len: int = 512) -> Optional[str]:
    if not s:
        return None
    # Unescape HTML entities then drop tags
    s = html.unescape(s)
    s = _TAG_RE.sub(" ", s)
    s = _WS_RE.sub(" ", s).strip()
    if not s:
        return None
    if len(s) > max_len:
        # Truncate at word boundary if possible
        cut = s.rfind(" ", 0, max_len)
        s = s[: cut if cut > 0 else max_len].rstrip()
    return s


def _first_variant(product: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    variants = product.get("variants")
    if isinstance(variants, dict):
        # GraphQL connection: {"edges": [{"node": {...}}]}
        edges = variants.get("edges") or []
        if edges and isinstance(edges[0], dict):
            node = edges[0].get("node")
            return node if isinstance(node, dict) else None
        return None
    if isinstance(variants, list) and variants and isinstance(variants[0], dict):
        return variants[0]
    return None


def _parse_price(product: Dict[str, Any]) -> Optional[str]:
    variant = _first_variant(product)
    if variant is None:
        return None
    price = variant.get("price")
    if isinstance(price, dict):
        # Newer GraphQL versions return MoneyV2 {"amount": "..."}
        price = price.get("amount")
    if price is None:
        return None
    return str(price).strip() or None


def _parse_tags(raw: Any) -> Optional[List[str]]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        return None
    tags = [str(t).strip() for t in raw if str(t).strip()]
    return tags or None


def map_shopify_product(p: Dict[str, Any]) -> Optional[ProductIn]:
    # Basic guards
    if not isinstance(p, dict) or not p.get("title") or p.get("id") is None:
        return None

    product_type = p.get("product_type") or p.get("productType") or None
    if product_type is not None:
        product_type = str(product_type).strip() or None

    return ProductIn(
        id=str(p.get("id")),
        title=str(p.get("title")),
        description=_html_to_text(p.get("body_html") or p.get("description")),
        price=_parse_price(p),
        product_type=product_type,
        vendor=p.get("vendor") or None,
        tags=_parse_tags(p.get("tags")),
    )


def map_shopify_products(products: List[Dict[str, Any]]) -> List[ProductIn]:
    out: List[ProductIn] = []
    for p in products:
        mp = map_shopify_product(p)
        if mp is not None:
            out.append(mp)
    return out
