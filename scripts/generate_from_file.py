#!/usr/bin/env python3
"""
Load Shopify products from a JSON export, adapt them to ProductIn, generate a
quiz, save it as JSON and print a concise preview.

Usage:
  python3 scripts/generate_from_file.py --path data/products.json [--limit N] [--style STYLE]

Notes:
- Requires OPENAI_API_KEY for the AI path; without it the rule-based quiz is produced.
- The export may be {"products": [...]} or a GraphQL {"data": {"products": {"edges": [...]}}} payload.
"""
from __future__ import annotations

import os
import sys
import argparse
import json
import asyncio
from typing import List, Dict, Any

# Ensure repo root is on sys.path when running as a script
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from quizgen.services.product_adapter import map_shopify_products  # noqa: E402
from quizgen.services.quiz_generator import generate_quiz_questions  # noqa: E402
from quizgen.schemas import coerce_style  # noqa: E402
from quizgen.config import settings  # noqa: E402
from generate_samples import print_preview  # noqa: E402


def load_products(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return data
    edges = (((data.get("data") or {}).get("products") or {}).get("edges")) or []
    if edges:
        return [edge.get("node") or {} for edge in edges]
    return data.get("products", [])


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--path", default="data/products.json", help="Input JSON path")
    parser.add_argument("--limit", type=int, default=settings.product_limit_default, help="Max products to use")
    parser.add_argument("--style", default="professional", help="fun | professional | detailed")
    parser.add_argument(
        "--out",
        default="data/generated_quiz.json",
        help="Output JSON path for the generated quiz",
    )
    args = parser.parse_args()

    limit = max(settings.product_limit_min, min(args.limit, settings.product_limit_max))
    products = map_shopify_products(load_products(args.path)[:limit])

    if not products:
        print("No valid products found in input.")
        return

    result = await generate_quiz_questions(products, coerce_style(args.style))

    out_dir = os.path.dirname(args.out)
    if out_dir and not os.path.exists(out_dir):
        os.makedirs(out_dir, exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(mode="json", by_alias=True), f, ensure_ascii=False, indent=2)
    print(f"Saved {len(result.questions)} questions to {args.out}")

    print_preview(result)


if __name__ == "__main__":
    asyncio.run(main())
