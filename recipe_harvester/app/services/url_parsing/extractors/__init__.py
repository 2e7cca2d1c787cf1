"""Recipe extractors for different parsing strategies."""

from recipe_harvester.app.services.url_parsing.extractors.schema_org import (
    try_extract_structured,
    try_parse_block,
)
from recipe_harvester.app.services.url_parsing.extractors.site_markup import (
    extract_from_markup,
    parse_site_markup,
)

__all__ = [
    "extract_from_markup",
    "parse_site_markup",
    "try_extract_structured",
    "try_parse_block",
]
