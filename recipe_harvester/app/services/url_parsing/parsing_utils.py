"""General parsing utilities for recipe extraction."""

import math
import re
from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from recipe_harvester.app.services.url_parsing.constants import CATEGORY_MAP, URL_CATEGORY_KEYWORDS
from recipe_harvester.app.services.url_parsing.models import RecipeCategory

_ISO_DURATION = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$", re.I)
_DIGITS = re.compile(r"\d+")


def parse_document(html: str) -> BeautifulSoup:
    """Parse raw page text into a queryable element tree."""
    return BeautifulSoup(html or "", "lxml")


def clean_text(text: Optional[str]) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def parse_iso8601_duration(duration: str) -> Optional[int]:
    """Parse a PT duration (e.g. PT15M, PT1H30M) into whole minutes."""
    if not duration:
        return None
    match = _ISO_DURATION.match(duration.strip())
    if not match:
        return None
    hours, minutes = match.group(1), match.group(2)
    if hours is None and minutes is None:
        return None
    return int(hours or 0) * 60 + int(minutes or 0)


def parse_time_value(value) -> Optional[int]:
    """
    Normalize a prep/cook time to minutes.

    Accepts numbers, ISO-8601 durations (``PT15M``) and free text such as
    ``"20 minutes"``, where the first run of digits is used. Anything else is
    unknown (``None``).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) and value >= 0 else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.upper().startswith("PT"):
        return parse_iso8601_duration(text)
    match = _DIGITS.search(text)
    return int(match.group()) if match else None


def extract_number_value(value) -> Optional[int]:
    """Return the first run of digits in a number or text, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, list):
        return extract_number_value(value[0]) if value else None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    match = _DIGITS.search(str(value))
    return int(match.group()) if match else None


def parse_servings(value) -> Optional[int]:
    """Parse servings; zero servings is treated as unknown."""
    number = extract_number_value(value)
    return number if number and number > 0 else None


def normalize_category(value) -> RecipeCategory:
    """Map a free-form category onto the canonical set, defaulting to main."""
    if isinstance(value, list):
        value = next((item for item in value if isinstance(item, str) and item.strip()), None)
    if not isinstance(value, str):
        return RecipeCategory.MAIN
    return CATEGORY_MAP.get(value.lower().strip(), RecipeCategory.MAIN)


def category_from_url(url: Optional[str]) -> RecipeCategory:
    """Infer a category from keywords in the URL path."""
    path = urlparse(url or "").path.lower()
    for keyword, category in URL_CATEGORY_KEYWORDS:
        if keyword in path:
            return category
    return RecipeCategory.MAIN


def extract_image(value) -> Optional[str]:
    """Extract image URL from the schema.org image forms (string, list, ImageObject)."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get("url")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def extract_instruction_text(instructions) -> List[str]:
    """Extract step text from strings, HowToStep objects and HowToSection groups."""
    steps: List[str] = []
    if isinstance(instructions, str):
        instructions = [instructions]
    if not isinstance(instructions, list):
        return steps
    for entry in instructions:
        if isinstance(entry, str):
            text = entry
        elif isinstance(entry, dict):
            if isinstance(entry.get("itemListElement"), list):
                steps.extend(extract_instruction_text(entry["itemListElement"]))
                continue
            text = entry.get("text") or entry.get("name") or ""
        else:
            continue
        cleaned = clean_text(text if isinstance(text, str) else "")
        if cleaned:
            steps.append(cleaned)
    return steps


def extract_ingredient_text(ingredients) -> List[str]:
    if isinstance(ingredients, str):
        ingredients = [ingredients]
    if not isinstance(ingredients, list):
        return []
    return [clean_text(item) for item in ingredients if isinstance(item, str) and clean_text(item)]


def coerce_keywords(value) -> List[str]:
    """Turn schema.org keywords (list or comma-separated text) into tags."""
    if not value:
        return []
    if isinstance(value, list):
        value = ", ".join(str(item) for item in value if item)
    if not isinstance(value, str):
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]
