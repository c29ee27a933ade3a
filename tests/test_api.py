import pytest
from fastapi.testclient import TestClient

from quizgen.config import settings
from quizgen.main import app, clamp_product_limit


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "ai_generation_enabled", False)
    with TestClient(app) as c:
        yield c


PRODUCTS = [
    {"id": "1", "title": "Board", "price": "600", "product_type": "Snowboards", "tags": ["Modern"]},
    {"id": "2", "title": "Mitts", "price": 25, "product_type": "Mittens", "tags": ["Natural"]},
]


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy"}


def test_generate_returns_camel_case_questions(client):
    res = client.post("/generate", json={"products": PRODUCTS, "style": "fun"})
    assert res.status_code == 200
    data = res.json()
    assert data["source"] == "rule_based"
    assert data["product_count"] == 2
    assert data["questions"][0]["text"] == "What's your vibe today?"
    budget = next(q for q in data["questions"] if q["text"] == "What's your budget?")
    assert budget["options"][0]["matchingTypes"] == ["Mittens"]
    assert "budgetMax" in budget["options"][0]


def test_invalid_style_is_coerced_to_professional(client):
    res = client.post("/generate", json={"products": PRODUCTS, "style": "weird"})
    assert res.status_code == 200
    assert res.json()["questions"][0]["text"] == "What are you looking for?"


def test_empty_catalog_is_rejected(client):
    res = client.post("/generate", json={"products": []})
    assert res.status_code == 400
    assert "No products found" in res.json()["detail"]


def test_shopify_endpoint_adapts_products(client):
    res = client.post("/generate/shopify", json={"products": [
        {"id": 1, "title": "Board", "productType": "Snowboards", "variants": {"edges": [{"node": {"price": "650"}}]}},
        {"id": 2, "title": "Mitts", "product_type": "Mittens", "variants": [{"price": "20"}]},
        {"title": "missing id"},
    ]})
    assert res.status_code == 200
    assert res.json()["product_count"] == 2


def test_rate_limit_returns_429(client, monkeypatch):
    limiter = app.state.rate_limiter
    monkeypatch.setattr(limiter, "max_requests", 1)
    headers = {"x-forwarded-for": "9.9.9.9"}
    assert client.post("/generate", json={"products": PRODUCTS}, headers=headers).status_code == 200
    res = client.post("/generate", json={"products": PRODUCTS}, headers=headers)
    assert res.status_code == 429
    assert "Retry-After" in res.headers
    assert res.headers["X-RateLimit-Remaining"] == "0"


@pytest.mark.parametrize("raw,expected", [(None, 50), (0, 50), (5, 10), (500, 100), (42, 42)])
def test_clamp_product_limit(raw, expected):
    assert clamp_product_limit(raw) == expected
