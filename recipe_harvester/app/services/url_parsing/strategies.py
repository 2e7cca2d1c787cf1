"""Extraction strategies selected per URL hostname."""

import logging
from typing import Dict, Mapping, Optional

from bs4 import BeautifulSoup

from recipe_harvester.app.services.url_parsing.errors import ErrorKind, ExtractionError
from recipe_harvester.app.services.url_parsing.extractors.schema_org import try_extract_structured
from recipe_harvester.app.services.url_parsing.extractors.site_markup import extract_from_markup
from recipe_harvester.app.services.url_parsing.models import RecipeDraft, SiteSelectors

logger = logging.getLogger(__name__)


class ExtractionStrategy:
    """Turns a parsed page into a recipe draft or raises ExtractionError."""

    name = "base"

    def extract(self, document: BeautifulSoup, url: Optional[str] = None) -> RecipeDraft:
        raise NotImplementedError


class StructuredDataStrategy(ExtractionStrategy):
    """Embedded schema.org JSON-LD; the first step of every other strategy."""

    name = "structured_data"

    def find(self, document: BeautifulSoup, url: Optional[str] = None) -> Optional[RecipeDraft]:
        return try_extract_structured(document, url)

    def extract(self, document: BeautifulSoup, url: Optional[str] = None) -> RecipeDraft:
        draft = self.find(document, url)
        if draft is None:
            raise ExtractionError(ErrorKind.NO_STRUCTURED_DATA, detail="No recipe data found in JSON-LD format")
        return draft


class GenericMarkupStrategy(ExtractionStrategy):
    """Unknown sites: embedded JSON-LD is the only source consulted."""

    name = "generic"

    def __init__(self, structured: Optional[StructuredDataStrategy] = None):
        self.structured = structured or StructuredDataStrategy()

    def extract(self, document: BeautifulSoup, url: Optional[str] = None) -> RecipeDraft:
        return self.structured.extract(document, url)


class SiteSpecificMarkupStrategy(ExtractionStrategy):
    """Known sites: JSON-LD first, then the site's CSS selector table."""

    def __init__(
        self,
        site_id: str,
        selectors: SiteSelectors,
        structured: Optional[StructuredDataStrategy] = None,
    ):
        self.site_id = site_id
        self.selectors = selectors
        self.structured = structured or StructuredDataStrategy()
        self.name = f"site_markup:{site_id}"

    def extract(self, document: BeautifulSoup, url: Optional[str] = None) -> RecipeDraft:
        draft = self.structured.find(document, url)
        if draft is not None:
            return draft
        logger.info("No JSON-LD recipe for %s; falling back to %s selectors", url, self.site_id)
        return extract_from_markup(document, self.selectors, url=url, site_id=self.site_id)


def match_site(hostname: str, supported_sites: Mapping[str, str]) -> Optional[str]:
    """Return the site id for a hostname or any of its subdomains."""
    host = (hostname or "").lower().rstrip(".")
    for pattern, site_id in supported_sites.items():
        pattern = pattern.lower()
        if host == pattern or host.endswith("." + pattern):
            return site_id
    return None


def resolve_strategy(
    hostname: str,
    supported_sites: Mapping[str, str],
    site_selectors: Dict[str, SiteSelectors],
) -> ExtractionStrategy:
    site_id = match_site(hostname, supported_sites)
    if site_id is None:
        return GenericMarkupStrategy()
    selectors = site_selectors.get(site_id)
    if selectors is None:
        logger.warning("Site %s has no selector table; using generic extraction", site_id)
        return GenericMarkupStrategy()
    return SiteSpecificMarkupStrategy(site_id, selectors)
