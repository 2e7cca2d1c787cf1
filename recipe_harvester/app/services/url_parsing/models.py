"""Pydantic models for URL recipe parsing."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RecipeCategory(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    DESSERT = "dessert"
    SNACK = "snack"
    APPETIZER = "appetizer"
    MAIN = "main"
    SIDE = "side"
    SOUP = "soup"
    SALAD = "salad"
    BEVERAGE = "beverage"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class OrderedText(BaseModel):
    """A numbered line of recipe text (ingredient or instruction)."""

    ordinal: int = Field(ge=1)
    text: str = Field(min_length=1)


class RecipeMetadata(BaseModel):
    category: RecipeCategory = RecipeCategory.MAIN
    prep_time_minutes: Optional[int] = Field(default=None, ge=0)
    cook_time_minutes: Optional[int] = Field(default=None, ge=0)
    servings: Optional[int] = Field(default=None, ge=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    tags: List[str] = Field(default_factory=list)


class RecipeDraft(BaseModel):
    """A recipe extracted from a page, ready for user review."""

    title: str = ""
    image: Optional[str] = None
    ingredients: List[OrderedText] = Field(default_factory=list)
    instructions: List[OrderedText] = Field(default_factory=list)
    metadata: RecipeMetadata = Field(default_factory=RecipeMetadata)
    source_url: Optional[str] = None
    strategy: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.title.strip()) and bool(self.ingredients) and bool(self.instructions)


class FetchOutcome(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class FetchAttempt(BaseModel):
    """One request through one proxy route during a single extraction."""

    route: str
    attempt_number: int = 1
    outcome: FetchOutcome
    error_detail: Optional[str] = None
    # Failure reason: "blocked", "rate_limited", "timeout", "http_status", "empty", "network"
    reason: Optional[str] = None


class SiteSelectors(BaseModel):
    """Prioritized CSS selector candidates for one site family."""

    title: List[str] = Field(default_factory=list)
    image: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    prep_time: List[str] = Field(default_factory=list)
    cook_time: List[str] = Field(default_factory=list)
    servings: List[str] = Field(default_factory=list)
    category: List[str] = Field(default_factory=list)


def number_lines(lines: List[str]) -> List[OrderedText]:
    """Number non-empty lines 1..n, keeping source order."""
    cleaned = [line.strip() for line in lines if line and line.strip()]
    return [OrderedText(ordinal=idx, text=text) for idx, text in enumerate(cleaned, start=1)]
