import asyncio
from contextlib import asynccontextmanager, suppress
from typing import List

from fastapi import FastAPI, HTTPException, Request
from quizgen.config import settings, setup_logging
from quizgen.errors import EmptyCatalogError
from quizgen.rate_limit import RateLimiter, client_ip, run_sweeper
from quizgen.schemas import GenerateRequest, GenerationResult, ProductIn, ShopifyGenerateRequest, coerce_style
from quizgen.services.quiz_generator import generate_quiz_questions
from quizgen.services.product_adapter import map_shopify_products

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    sweeper = asyncio.create_task(run_sweeper(app.state.rate_limiter, settings.rate_limit_sweep_seconds))
    try:
        yield
    finally:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    lifespan=lifespan,
)


def clamp_product_limit(limit) -> int:
    if not limit:
        return settings.product_limit_default
    return max(settings.product_limit_min, min(int(limit), settings.product_limit_max))


def enforce_rate_limit(request: Request) -> None:
    limiter: RateLimiter = request.app.state.rate_limiter
    key = f"generate:{client_ip(request.headers, request.client.host if request.client else None)}"
    if not limiter.check(key):
        retry_after = limiter.retry_after(key)
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please try again later.",
            headers={"Retry-After": str(retry_after), **limiter.headers(key)},
        )


async def _generate(products: List[ProductIn], style, product_limit) -> GenerationResult:
    products = products[: clamp_product_limit(product_limit)]
    try:
        return await generate_quiz_questions(products, coerce_style(style))
    except EmptyCatalogError as exc:
        logger.warning("Rejected generation request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.post("/generate", response_model=GenerationResult)
async def generate_quiz(payload: GenerateRequest, request: Request):
    """
    Accepts a merchant's products and returns generated quiz questions.
    """
    enforce_rate_limit(request)
    return await _generate(payload.products, payload.style, payload.product_limit)


@app.post("/generate/shopify", response_model=GenerationResult)
async def generate_quiz_shopify(payload: ShopifyGenerateRequest, request: Request):
    """
    Accepts Shopify-like product objects, adapts them into ProductIn, and returns generated questions.
    """
    enforce_rate_limit(request)
    products = map_shopify_products(payload.products)
    return await _generate(products, payload.style, payload.product_limit)
