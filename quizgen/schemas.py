from enum import Enum
import math
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any, Union


class QuizStyle(str, Enum):
    FUN = "fun"
    PROFESSIONAL = "professional"
    DETAILED = "detailed"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    IMAGE_CHOICE = "image_choice"
    TEXT_INPUT = "text_input"


def coerce_style(value: Any) -> QuizStyle:
    """Map a caller-supplied style to a QuizStyle, defaulting to professional."""
    if isinstance(value, QuizStyle):
        return value
    try:
        return QuizStyle(str(value or "").strip().lower())
    except ValueError:
        return QuizStyle.PROFESSIONAL


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go up, not to even)."""
    return int(math.floor(value + 0.5))


class ProductIn(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    # Price of the first variant; may arrive as the raw string from the commerce API
    price: Optional[Union[float, str]] = None
    product_type: Optional[str] = None
    vendor: Optional[str] = None
    tags: Optional[List[str]] = None


# --- Catalog summary ---

class ProductSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    price: Optional[float] = None


class Vocabulary(BaseModel):
    tags: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)


class CatalogSummary(BaseModel):
    products: List[ProductSummary]
    vocabulary: Vocabulary
    vendors: List[str] = Field(default_factory=list)
    prices: List[float] = Field(default_factory=list)
    prices_by_type: Dict[str, List[float]] = Field(default_factory=dict)


class PriceRange(BaseModel):
    min: float
    max: float


class PriceBracket(BaseModel):
    index: int
    min: Optional[float] = None
    max: Optional[float] = None  # None means open-ended
    eligible_types: List[str] = Field(default_factory=list)
    decimals: int = 0  # label precision; whole dollars unless that collides

    def _money(self, value: float) -> str:
        if self.decimals:
            return f"${value:.{self.decimals}f}"
        return f"${round_half_up(value)}"

    @property
    def label(self) -> str:
        if self.max is None:
            return f"Over {self._money(self.min or 0)}"
        if not self.min:
            return f"Under {self._money(self.max)}"
        return f"{self._money(self.min)} - {self._money(self.max)}"


# --- Questions ---

class QuestionOption(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    matching_tags: List[str] = Field(default_factory=list, alias="matchingTags")
    matching_types: List[str] = Field(default_factory=list, alias="matchingTypes")
    budget_min: Optional[float] = Field(default=None, alias="budgetMin")
    budget_max: Optional[float] = Field(default=None, alias="budgetMax")
    price_range: Optional[PriceRange] = Field(default=None, alias="priceRange")


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    text: str
    type: QuestionType = QuestionType.MULTIPLE_CHOICE
    order: int = Field(default=0, ge=0)
    conditional_rules: Optional[Dict[str, Any]] = Field(default=None, alias="conditionalRules")
    options: List[QuestionOption] = Field(min_length=1)


class GenerationResult(BaseModel):
    questions: List[Question]
    source: str  # "ai" | "rule_based"
    product_count: int
    dropped_values: int = 0


# --- HTTP payloads ---

class GenerateRequest(BaseModel):
    products: List[ProductIn]
    style: Optional[str] = None
    product_limit: Optional[int] = None


class ShopifyGenerateRequest(BaseModel):
    """Accepts raw Shopify-like product objects (REST or GraphQL node dicts)."""
    products: List[Dict[str, Any]]
    style: Optional[str] = None
    product_limit: Optional[int] = None
