#!/usr/bin/env python3
"""
Generate a quiz for a few sample Shopify-like products and print a concise preview.
No file is saved—this is for quick manual testing.

Usage:
  python3 scripts/generate_samples.py [--style fun|professional|detailed] [--no-ai]
"""
from __future__ import annotations

import os
import sys
import argparse
import asyncio
from typing import List, Dict, Any

# Ensure repo root is on sys.path when running as a script
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from quizgen.services.product_adapter import map_shopify_products  # noqa: E402
from quizgen.services.quiz_generator import generate_quiz_questions  # noqa: E402
from quizgen.schemas import GenerationResult, coerce_style  # noqa: E402


SAMPLES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "The Complete Snowboard",
        "body_html": "<p>All-mountain board with a <strong>modern</strong> camber profile.</p>",
        "vendor": "Snowboard Vendor",
        "product_type": "Snowboards",
        "tags": ["Premium", "Modern", "Winter"],
        "variants": [{"price": "699.95"}, {"price": "749.95"}],
    },
    {
        "id": 2,
        "title": "The Minimal Snowboard",
        "body_html": "<p>Lightweight freestyle board, <em>minimal</em> graphics.</p>",
        "vendor": "Snowboard Vendor",
        "product_type": "Snowboards",
        "tags": ["Minimalist", "Freestyle", "Winter"],
        "variants": [{"price": "600.00"}],
    },
    {
        "id": 3,
        "title": "Wool Mittens",
        "body_html": "<p>Warm, <em>natural</em> wool mittens with fleece lining.</p>",
        "vendor": "Cosy Co",
        "product_type": "Mittens",
        "tags": ["Natural", "Wool", "Gift"],
        "variants": [{"price": "24.00"}],
    },
    {
        "id": 4,
        "title": "Classic Ski Wax",
        "body_html": "<p>All-temperature wax for skis and boards.</p>",
        "vendor": "Cosy Co",
        "product_type": "Accessories",
        "tags": ["Classic", "Essential"],
        "variants": [{"price": "12.50"}],
    },
]


def print_preview(result: GenerationResult):
    print(f"\n=== Quiz ({result.source}, {result.product_count} products) ===")
    for q in result.questions:
        print(f"\n[{q.order}] {q.text}")
        for o in q.options:
            extras = []
            if o.matching_tags:
                extras.append("tags=" + ",".join(o.matching_tags))
            if o.matching_types:
                extras.append("types=" + ",".join(o.matching_types))
            if o.budget_min is not None or o.budget_max is not None:
                extras.append(f"budget={o.budget_min}..{o.budget_max}")
            print(f"  - {o.text}" + (f"  ({'; '.join(extras)})" if extras else ""))


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--style", default="professional", help="fun | professional | detailed")
    parser.add_argument("--no-ai", action="store_true", help="Skip the model call and use rule-based questions")
    args = parser.parse_args()

    products = map_shopify_products(SAMPLES)
    result = await generate_quiz_questions(
        products,
        coerce_style(args.style),
        use_ai=False if args.no_ai else None,
    )
    print_preview(result)


if __name__ == "__main__":
    asyncio.run(main())
