import pytest

from quizgen.errors import EmptyCatalogError
from quizgen.services.catalog import parse_price, summarize_catalog


def test_empty_catalog_raises():
    with pytest.raises(EmptyCatalogError):
        summarize_catalog([])


def test_vocabulary_keeps_case_and_first_seen_order(make_product):
    summary = summarize_catalog([
        make_product("1", "10", "Shirts", ["Cotton", " ", "Summer"]),
        make_product("2", "20", "shirts", ["Summer", "cotton"]),
        make_product("3", "5", "  ", None),
    ])
    assert summary.vocabulary.tags == ["Cotton", "Summer", "cotton"]
    assert summary.vocabulary.types == ["Shirts", "shirts"]


def test_unusable_prices_are_excluded_but_vocabulary_is_kept(make_product):
    summary = summarize_catalog([
        make_product("1", "abc", "Hats", ["Wool"]),
        make_product("2", "0", "Scarves", ["Silk"]),
        make_product("3", "-4", "Gloves"),
        make_product("4", "19.99", "Hats"),
        make_product("5", None, None, ["Gift"]),
    ])
    assert summary.prices == [19.99]
    assert summary.prices_by_type == {"Hats": [19.99]}
    assert summary.vocabulary.types == ["Hats", "Scarves", "Gloves"]
    assert summary.vocabulary.tags == ["Wool", "Silk", "Gift"]
    assert summary.products[0].price is None


def test_untyped_products_only_feed_flat_distribution(make_product):
    summary = summarize_catalog([make_product("1", 20), make_product("2", "40"), make_product("3", 100.0)])
    assert summary.prices == [20.0, 40.0, 100.0]
    assert summary.prices_by_type == {}


@pytest.mark.parametrize("raw,expected", [
    ("12.50", 12.5),
    (7, 7.0),
    ("nan", None),
    ("inf", None),
    ("", None),
    (True, None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected
