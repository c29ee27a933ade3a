from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

from quizgen.config import settings
from quizgen.schemas import ProductIn


class FakeCompletions:
    def __init__(self, content: Optional[str] = None, error: Optional[BaseException] = None, delay: float = 0.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Stand-in for AsyncOpenAI exposing ``chat.completions.create``."""

    def __init__(self, content: Any = None, error: Optional[BaseException] = None, delay: float = 0.0):
        if content is not None and not isinstance(content, str):
            content = json.dumps(content)
        self.completions = FakeCompletions(content, error, delay)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture(autouse=True)
def no_real_openai(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", "")


@pytest.fixture
def fake_openai():
    return FakeOpenAI


def product(pid: str, price=None, product_type=None, tags=None, title=None) -> ProductIn:
    return ProductIn(
        id=pid,
        title=title or f"Product {pid}",
        price=price,
        product_type=product_type,
        tags=tags,
    )


@pytest.fixture
def winter_catalog() -> List[ProductIn]:
    return [
        product("1", "600.00", "Snowboards", ["Modern", "Premium"]),
        product("2", "650.00", "Snowboards", ["Minimalist", "Freestyle"]),
        product("3", "20.00", "Mittens", ["Natural", "Wool"]),
        product("4", "30.00", "Mittens", ["Gift", "Wool"]),
    ]


@pytest.fixture
def make_product():
    return product
