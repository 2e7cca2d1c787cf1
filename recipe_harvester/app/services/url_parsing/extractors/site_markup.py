"""CSS-selector recipe extraction for supported site families."""

import logging
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from recipe_harvester.app.services.url_parsing.errors import ErrorKind, ExtractionError
from recipe_harvester.app.services.url_parsing.extractors.schema_org import try_extract_structured
from recipe_harvester.app.services.url_parsing.models import (
    RecipeDraft,
    RecipeMetadata,
    SiteSelectors,
    number_lines,
)
from recipe_harvester.app.services.url_parsing.parsing_utils import (
    category_from_url,
    clean_text,
    normalize_category,
    parse_servings,
    parse_time_value,
)

logger = logging.getLogger(__name__)


def _select_first(document: BeautifulSoup, selectors: List[str]):
    if not selectors:
        return None
    return document.select_one(", ".join(selectors))


def _select_all(document: BeautifulSoup, selectors: List[str]):
    if not selectors:
        return []
    return document.select(", ".join(selectors))


def _select_text(document: BeautifulSoup, selectors: List[str]) -> Optional[str]:
    element = _select_first(document, selectors)
    return clean_text(element.get_text(" ", strip=True)) if element else None


def _select_image(document: BeautifulSoup, selectors: List[str], url: Optional[str]) -> Optional[str]:
    element = _select_first(document, selectors)
    if element is None:
        return None
    src = element.get("src") or element.get("data-src")
    if not src:
        return None
    return urljoin(url, src) if url else src


def validate_required_fields(draft: RecipeDraft) -> RecipeDraft:
    """Fail on the first missing required field: title, ingredients, instructions."""
    if not draft.title:
        raise ExtractionError(ErrorKind.TITLE_NOT_FOUND, detail="Recipe title not found")
    if not draft.ingredients:
        raise ExtractionError(ErrorKind.INGREDIENTS_NOT_FOUND, detail="Recipe ingredients not found")
    if not draft.instructions:
        raise ExtractionError(ErrorKind.INSTRUCTIONS_NOT_FOUND, detail="Recipe instructions not found")
    return draft


def parse_site_markup(
    document: BeautifulSoup,
    selectors: SiteSelectors,
    url: Optional[str] = None,
    site_id: Optional[str] = None,
) -> RecipeDraft:
    """Scrape a recipe with a site's selector table and validate required fields."""
    ingredients = [el.get_text(" ", strip=True) for el in _select_all(document, selectors.ingredients)]
    instructions = [el.get_text(" ", strip=True) for el in _select_all(document, selectors.instructions)]

    category_text = _select_text(document, selectors.category)
    if category_text is not None:
        category = normalize_category(category_text)
    else:
        category = category_from_url(url)

    draft = RecipeDraft(
        title=_select_text(document, selectors.title) or "",
        image=_select_image(document, selectors.image, url),
        ingredients=number_lines([clean_text(text) for text in ingredients]),
        instructions=number_lines([clean_text(text) for text in instructions]),
        metadata=RecipeMetadata(
            category=category,
            prep_time_minutes=parse_time_value(_select_text(document, selectors.prep_time)),
            cook_time_minutes=parse_time_value(_select_text(document, selectors.cook_time)),
            servings=parse_servings(_select_text(document, selectors.servings)),
        ),
        source_url=url,
        strategy=f"site_markup:{site_id}" if site_id else "site_markup",
    )
    logger.info(
        "Markup extraction (%s): title=%s, ingredients=%d, steps=%d",
        site_id or "site",
        draft.title[:50] or "None",
        len(draft.ingredients),
        len(draft.instructions),
    )
    return validate_required_fields(draft)


def extract_from_markup(
    document: BeautifulSoup,
    selectors: Optional[SiteSelectors],
    url: Optional[str] = None,
    site_id: Optional[str] = None,
) -> RecipeDraft:
    """
    Extract a recipe from page markup.

    With a selector table the page is scraped site-specifically. Without one
    (unknown sites) only embedded JSON-LD is consulted, and its absence is a
    ``no_structured_data`` failure.
    """
    if selectors is None:
        draft = try_extract_structured(document, url)
        if draft is None:
            raise ExtractionError(ErrorKind.NO_STRUCTURED_DATA, detail="No recipe data found in JSON-LD format")
        return draft
    return parse_site_markup(document, selectors, url=url, site_id=site_id)
