"""Schema.org JSON-LD recipe extraction."""

import json
import logging
from typing import Iterator, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from recipe_harvester.app.services.url_parsing.models import RecipeDraft, RecipeMetadata, number_lines
from recipe_harvester.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_keywords,
    extract_image,
    extract_ingredient_text,
    extract_instruction_text,
    normalize_category,
    parse_servings,
    parse_time_value,
)

logger = logging.getLogger(__name__)

STRATEGY_NAME = "schema_org_json_ld"


def try_parse_block(raw_json: Optional[str]):
    """Parse one JSON-LD block; empty or malformed blocks give None."""
    if not raw_json or not raw_json.strip():
        return None
    try:
        return json.loads(raw_json)
    except json.JSONDecodeError as exc:
        logger.warning("JSON-LD block failed to parse: %s (first 200 chars: %s)", exc, raw_json[:200])
        return None


def _is_recipe(obj) -> bool:
    if not isinstance(obj, dict):
        return False
    obj_type = obj.get("@type")
    types = [obj_type] if isinstance(obj_type, str) else obj_type
    return isinstance(types, list) and "Recipe" in types


def iter_recipe_objects(document: BeautifulSoup) -> Iterator[dict]:
    """Yield Recipe-typed JSON-LD objects in document order."""
    scripts = document.find_all("script", attrs={"type": "application/ld+json"})
    logger.debug("Found %d JSON-LD script blocks", len(scripts))
    for script in scripts:
        data = try_parse_block(script.string or script.get_text())
        if data is None:
            continue
        candidates = data if isinstance(data, list) else [data]
        for obj in candidates:
            if _is_recipe(obj):
                yield obj
            elif isinstance(obj, dict) and isinstance(obj.get("@graph"), list):
                for node in obj["@graph"]:
                    if _is_recipe(node):
                        yield node


def recipe_from_json_ld(obj: dict, url: Optional[str] = None) -> RecipeDraft:
    """Map a schema.org Recipe object onto a draft."""
    image = extract_image(obj.get("image"))
    if image and url:
        image = urljoin(url, image)
    return RecipeDraft(
        title=clean_text(obj.get("name") if isinstance(obj.get("name"), str) else ""),
        image=image,
        ingredients=number_lines(extract_ingredient_text(obj.get("recipeIngredient"))),
        instructions=number_lines(extract_instruction_text(obj.get("recipeInstructions"))),
        metadata=RecipeMetadata(
            category=normalize_category(obj.get("recipeCategory")),
            prep_time_minutes=parse_time_value(obj.get("prepTime")),
            cook_time_minutes=parse_time_value(obj.get("cookTime")),
            servings=parse_servings(obj.get("recipeYield")),
            tags=coerce_keywords(obj.get("keywords")),
        ),
        source_url=url,
        strategy=STRATEGY_NAME,
    )


def try_extract_structured(document: BeautifulSoup, url: Optional[str] = None) -> Optional[RecipeDraft]:
    """Return a draft from the first JSON-LD Recipe in the page, or None."""
    for obj in iter_recipe_objects(document):
        draft = recipe_from_json_ld(obj, url)
        logger.info(
            "JSON-LD recipe found: title=%s, ingredients=%d, steps=%d",
            draft.title[:50] or "None",
            len(draft.ingredients),
            len(draft.instructions),
        )
        return draft
    return None
