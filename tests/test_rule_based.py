from quizgen.schemas import QuizStyle
from quizgen.services.brackets import plan_brackets
from quizgen.services.catalog import summarize_catalog
from quizgen.services.rule_based import build_rule_based_questions, style_tags


def _build(products, style=QuizStyle.PROFESSIONAL):
    summary = summarize_catalog(products)
    brackets = plan_brackets(summary.prices, summary.prices_by_type, summary.vocabulary.types)
    return build_rule_based_questions(summary, brackets, style)


def test_untyped_catalog_gets_use_case_budget_and_features(make_product):
    questions = _build([make_product("1", "20"), make_product("2", "40"), make_product("3", "100")])
    assert [q.text for q in questions] == [
        "What are you looking for?",
        "What's your budget?",
        "What's most important to you?",
    ]
    assert [q.order for q in questions] == [0, 1, 4]
    assert [len(q.options) for q in questions] == [4, 4, 4]
    budget = questions[1]
    assert budget.options[0].budget_min == 0
    assert budget.options[-1].budget_max is None
    for lower, upper in zip(budget.options, budget.options[1:]):
        assert lower.budget_max == upper.budget_min


def test_budget_question_omitted_without_prices(make_product):
    questions = _build([make_product("1", None, None, ["Gift"])])
    assert [q.order for q in questions] == [0, 4]


def test_all_archetypes_for_rich_catalog(winter_catalog):
    questions = _build(winter_catalog, QuizStyle.FUN)
    assert [q.order for q in questions] == [0, 1, 2, 3, 4]
    assert questions[0].text == "What's your vibe today?"
    assert questions[3].text == "Pick your aesthetic!"

    budget = questions[1]
    assert budget.options[0].matching_types == ["Mittens"]
    assert "Snowboards" not in budget.options[0].matching_types

    category = questions[2]
    assert [o.text for o in category.options] == ["Snowboards", "Mittens"]
    assert category.options[0].matching_types == ["Snowboards"]
    assert category.options[0].price_range.min == 600
    assert category.options[0].price_range.max == 650

    style = questions[3]
    assert [o.text for o in style.options] == ["Modern", "Minimalist", "Natural"]
    assert style.options[1].matching_tags == ["Minimalist"]


def test_category_price_range_defaults_to_zero_for_unpriced_type(make_product):
    questions = _build([make_product("1", "10", "Hats"), make_product("2", None, "Scarves")])
    category = next(q for q in questions if q.order == 2)
    assert category.options[1].price_range.min == 0
    assert category.options[1].price_range.max == 0


def test_category_options_capped_at_six(make_product):
    products = [make_product(str(i), "10", f"Type {i}") for i in range(9)]
    category = next(q for q in _build(products) if q.order == 2)
    assert len(category.options) == 6


def test_style_question_needs_two_style_tags(make_product):
    questions = _build([make_product("1", "10", None, ["Vintage", "Cotton"])])
    assert all(q.order != 3 for q in questions)


def test_style_tags_substring_case_insensitive():
    assert style_tags(["ORGANIC cotton", "boldface", "Wool"]) == ["ORGANIC cotton", "boldface"]


def test_style_options_capped_at_four(make_product):
    tags = ["modern", "classic", "vintage", "minimal", "bold"]
    style = next(q for q in _build([make_product("1", "10", None, tags)]) if q.order == 3)
    assert [o.text for o in style.options] == ["Modern", "Classic", "Vintage", "Minimal"]
