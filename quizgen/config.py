import os
from pydantic import BaseModel
from dotenv import load_dotenv
import logging
from typing import Optional

from openai import AsyncOpenAI


# Load .env file if present
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    project_name: str = "Catalog Quiz Generator"
    version: str = "0.1.0"

    # LLM
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "2000"))
    generation_timeout_seconds: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "15"))
    ai_generation_enabled: bool = _env_flag("AI_GENERATION_ENABLED", "true")

    # Quiz shape
    min_questions: int = int(os.getenv("MIN_QUESTIONS", "5"))
    max_questions: int = int(os.getenv("MAX_QUESTIONS", "7"))
    default_average_price: float = float(os.getenv("DEFAULT_AVERAGE_PRICE", "50"))

    # Catalog batch bounds
    product_limit_min: int = int(os.getenv("PRODUCT_LIMIT_MIN", "10"))
    product_limit_max: int = int(os.getenv("PRODUCT_LIMIT_MAX", "100"))
    product_limit_default: int = int(os.getenv("PRODUCT_LIMIT_DEFAULT", "50"))

    # Rate limiting (per client IP, HTTP boundary only)
    rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "10"))
    rate_limit_window_seconds: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    rate_limit_sweep_seconds: float = float(os.getenv("RATE_LIMIT_SWEEP_SECONDS", "300"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()



def setup_logging():
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    return logging.getLogger("quiz-gen")


def get_openai_async_client() -> Optional[AsyncOpenAI]:
    """Create and return an AsyncOpenAI client using env-configured API key.

    Returns None when no API key is configured. Callers should handle that case.
    """
    api_key = settings.openai_api_key
    if not api_key:
        return None
    return AsyncOpenAI(api_key=api_key, timeout=settings.generation_timeout_seconds, max_retries=0)
