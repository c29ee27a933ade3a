from typing import Dict, List, Sequence

from quizgen.schemas import CatalogSummary, PriceBracket, QuizStyle
from quizgen.services.brackets import type_price_range

# Keep prompts bounded for large catalogs.
MAX_PROMPT_TAGS = 100
MAX_PROMPT_VENDORS = 20

STYLE_GUIDES: Dict[QuizStyle, str] = {
	QuizStyle.FUN: (
		"Tone: playful and casual. Short, upbeat questions; light humour and emoji-free exclamations are welcome "
		"(e.g., 'Pick your vibe!'). Options read like things a friend would say."
	),
	QuizStyle.PROFESSIONAL: (
		"Tone: neutral and businesslike. Clear, concise questions (e.g., 'What are you looking for?'). "
		"Options are short, plain noun phrases."
	),
	QuizStyle.DETAILED: (
		"Tone: informative and thorough. Questions may include a brief clarifying clause explaining why it matters "
		"(e.g., 'Which material do you prefer, since it affects durability and care?'). Options may be descriptive."
	),
}


def system_prompt(style: QuizStyle) -> str:
	return (
		"You are an expert e-commerce merchandiser who designs product-recommendation quizzes for online stores. "
		"A shopper answers each question and their answers are matched against product tags, product types and "
		"price ranges to recommend products.\n\n"
		+ STYLE_GUIDES[style] + "\n\n"
		"Rules:\n"
		"1) Ask GENERAL, catalog-agnostic questions (use case, budget, style, priorities). "
		"Never ask a question that only makes sense for one category.\n"
		"2) Ask exactly ONE category-selection question whose options enumerate the known product types.\n"
		"3) Only use tags and product types from the lists you are given. Never invent new ones.\n"
		"4) Respond with a single JSON object and nothing else."
	)


def _price_stats_block(summary: CatalogSummary) -> str:
	lines: List[str] = []
	for type_name in summary.vocabulary.types:
		prices = summary.prices_by_type.get(type_name) or []
		price_range = type_price_range(prices)
		if price_range is None:
			lines.append(f"- {type_name}: no price data")
			continue
		avg = sum(prices) / len(prices)
		lines.append(
			f"- {type_name}: min ${price_range.min:.2f}, max ${price_range.max:.2f}, avg ${avg:.2f} ({len(prices)} products)"
		)
	return "\n".join(lines) if lines else "- (no product types)"


def _brackets_block(brackets: Sequence[PriceBracket]) -> str:
	lines: List[str] = []
	for bracket in brackets:
		upper = "no upper limit" if bracket.max is None else f"{bracket.max:.2f}"
		types = ", ".join(bracket.eligible_types) if bracket.eligible_types else "(none)"
		lines.append(
			f"{bracket.index + 1}. \"{bracket.label}\" budgetMin={bracket.min or 0:.2f} budgetMax={upper}; "
			f"types priced inside: {types}"
		)
	return "\n".join(lines)


def user_prompt_for_catalog(
	summary: CatalogSummary,
	brackets: Sequence[PriceBracket],
	style: QuizStyle,
	min_questions: int = 5,
	max_questions: int = 7,
) -> str:
	"""
	Build the instruction describing the catalog vocabulary, price brackets and
	the JSON shape the model must return.
	"""
	vocab = summary.vocabulary
	tags_str = ", ".join(vocab.tags[:MAX_PROMPT_TAGS]) or "(none)"
	types_str = ", ".join(vocab.types) or "(none)"

	parts = [
		f"Store catalog sample: {len(summary.products)} products.",
		f"Product types: {types_str}",
		f"Product tags: {tags_str}",
	]
	if summary.vendors:
		parts.append(f"Vendors: {', '.join(summary.vendors[:MAX_PROMPT_VENDORS])}")
	if summary.prices:
		avg = sum(summary.prices) / len(summary.prices)
		parts.append(
			f"Overall prices: min ${min(summary.prices):.2f}, max ${max(summary.prices):.2f}, avg ${avg:.2f}"
		)
	catalog_block = "\n".join(parts)

	instructions = (
		f"Task: Generate {min_questions}-{max_questions} quiz questions in the {style.value} style.\n"
		"Question 1 MUST be the budget question with EXACTLY 4 options, one per price bracket below, in order. "
		"Copy budgetMin/budgetMax from the bracket. Its matchingTypes may ONLY contain types listed as priced inside "
		"that bracket.\n"
		"Include exactly one category-selection question with one option per product type, each option's "
		"matchingTypes containing only that type.\n"
		"Every other question must apply to any product in the store. Give each question 3-5 options.\n"
		"matchingTags must be chosen from the product tags list; matchingTypes from the product types list. "
		"Use empty arrays when nothing fits.\n\n"
		"Return a single JSON object exactly in this shape (no comments, no markdown, no extra keys):\n"
		"{\"questions\":[{\"text\":\"string\",\"type\":\"multiple_choice\",\"order\":0,"
		"\"options\":[{\"text\":\"string\",\"matchingTags\":[\"tag\"],\"matchingTypes\":[\"type\"],"
		"\"budgetMin\":null,\"budgetMax\":null}]}]}\n"
	)

	return (
		"Design a product-recommendation quiz for this store.\n\n"
		+ catalog_block
		+ "\n\nPrice by category:\n"
		+ _price_stats_block(summary)
		+ "\n\nPrice brackets:\n"
		+ _brackets_block(brackets)
		+ "\n\n"
		+ instructions
	)
