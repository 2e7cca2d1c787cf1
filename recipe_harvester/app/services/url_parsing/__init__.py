"""URL recipe parsing package.

This package fetches recipe pages through a chain of proxy routes with
backoff retries, and extracts recipes from schema.org JSON-LD or, for
supported sites, from page markup via CSS selectors.
"""

from recipe_harvester.app.services.url_parsing.errors import (
    ErrorKind,
    ExtractionError,
    FetchError,
    classify_error,
)
from recipe_harvester.app.services.url_parsing.html_fetcher import ProxyFetcher, build_proxy_url
from recipe_harvester.app.services.url_parsing.models import (
    Difficulty,
    FetchAttempt,
    FetchOutcome,
    OrderedText,
    RecipeCategory,
    RecipeDraft,
    RecipeMetadata,
    SiteSelectors,
)
from recipe_harvester.app.services.url_parsing.parsing_utils import (
    category_from_url,
    clean_text,
    coerce_keywords,
    extract_image,
    extract_instruction_text,
    extract_number_value,
    normalize_category,
    parse_document,
    parse_iso8601_duration,
    parse_servings,
    parse_time_value,
)
from recipe_harvester.app.services.url_parsing.retry import backoff_delay_ms, with_retry
from recipe_harvester.app.services.url_parsing.strategies import (
    ExtractionStrategy,
    GenericMarkupStrategy,
    SiteSpecificMarkupStrategy,
    StructuredDataStrategy,
    resolve_strategy,
)

__all__ = [
    # Models
    "Difficulty",
    "FetchAttempt",
    "FetchOutcome",
    "OrderedText",
    "RecipeCategory",
    "RecipeDraft",
    "RecipeMetadata",
    "SiteSelectors",
    # Errors
    "ErrorKind",
    "ExtractionError",
    "FetchError",
    "classify_error",
    # Fetching
    "ProxyFetcher",
    "backoff_delay_ms",
    "build_proxy_url",
    "with_retry",
    # Strategies
    "ExtractionStrategy",
    "GenericMarkupStrategy",
    "SiteSpecificMarkupStrategy",
    "StructuredDataStrategy",
    "resolve_strategy",
    # Parsing utilities
    "category_from_url",
    "clean_text",
    "coerce_keywords",
    "extract_image",
    "extract_instruction_text",
    "extract_number_value",
    "normalize_category",
    "parse_document",
    "parse_iso8601_duration",
    "parse_servings",
    "parse_time_value",
]
