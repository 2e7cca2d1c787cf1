import asyncio
import logging
from typing import Awaitable, Callable, List, Optional
from urllib.parse import urlparse

from recipe_harvester.app.core.config import Settings, get_settings
from recipe_harvester.app.services.url_parsing.errors import ErrorKind, ExtractionError, classify_error
from recipe_harvester.app.services.url_parsing.html_fetcher import ProxyFetcher
from recipe_harvester.app.services.url_parsing.models import FetchAttempt, RecipeDraft
from recipe_harvester.app.services.url_parsing.parsing_utils import parse_document
from recipe_harvester.app.services.url_parsing.retry import with_retry
from recipe_harvester.app.services.url_parsing.strategies import resolve_strategy

logger = logging.getLogger(__name__)


def validate_url(url) -> str:
    """Return the trimmed URL, or raise invalid_input for anything not absolute http(s)."""
    if not isinstance(url, str) or not url.strip():
        raise ExtractionError(ErrorKind.INVALID_INPUT, detail="Invalid URL provided")
    normalized = url.strip()
    try:
        parsed = urlparse(normalized)
        hostname = parsed.hostname
    except ValueError as exc:
        raise ExtractionError(ErrorKind.INVALID_INPUT, detail="Invalid URL format") from exc
    if parsed.scheme.lower() not in {"http", "https"}:
        raise ExtractionError(ErrorKind.INVALID_INPUT, detail="URL must start with http:// or https://")
    if not hostname:
        raise ExtractionError(ErrorKind.INVALID_INPUT, detail="Invalid URL format")
    return normalized


def ensure_complete(draft: RecipeDraft) -> RecipeDraft:
    if draft.is_complete():
        return draft
    missing = []
    if not draft.title.strip():
        missing.append("title")
    if not draft.ingredients:
        missing.append("ingredients")
    if not draft.instructions:
        missing.append("instructions")
    raise ExtractionError(
        ErrorKind.INCOMPLETE_RESULT,
        detail=f"Incomplete recipe data found: missing {', '.join(missing)}",
    )


async def _extract(
    url,
    settings: Settings,
    fetcher: Optional[ProxyFetcher],
    sleep: Callable[[float], Awaitable[None]],
) -> RecipeDraft:
    normalized = validate_url(url)
    strategy = resolve_strategy(
        urlparse(normalized).hostname or "", settings.supported_sites, settings.site_selectors
    )
    logger.info("Extracting recipe from %s using %s strategy", normalized, strategy.name)

    fetcher = fetcher or ProxyFetcher.from_settings(settings)
    attempts: List[FetchAttempt] = []

    async def fetch_once(attempt_number: int) -> str:
        return await fetcher.fetch(normalized, attempt_number=attempt_number, attempts=attempts)

    try:
        html = await with_retry(
            fetch_once,
            max_attempts=settings.fetch_max_attempts,
            base_delay_ms=settings.fetch_base_delay_ms,
            sleep=sleep,
        )
        draft = strategy.extract(parse_document(html), normalized)
    except ExtractionError as exc:
        logger.warning("Recipe extraction failed for %s: %s (%s)", normalized, exc.kind.value, exc.detail)
        raise
    except Exception as exc:
        error = classify_error(exc)
        if attempts:
            error.attempts = attempts
        if error.kind == ErrorKind.UNKNOWN:
            logger.exception("Unclassified error extracting recipe from %s", normalized)
        else:
            logger.warning("Recipe extraction failed for %s: %s (%s)", normalized, error.kind.value, error.detail)
        raise error from exc

    ensure_complete(draft)
    logger.info(
        "Extracted recipe %r from %s (%d ingredients, %d steps)",
        draft.title,
        normalized,
        len(draft.ingredients),
        len(draft.instructions),
    )
    return draft


async def extract(
    url,
    *,
    settings: Optional[Settings] = None,
    fetcher: Optional[ProxyFetcher] = None,
    timeout: Optional[float] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RecipeDraft:
    """
    Extract a complete recipe draft from a recipe page URL.

    Raises ExtractionError classified by kind on any failure. ``timeout``
    imposes a call-wide deadline in seconds; when it expires the in-flight
    request or backoff sleep is cancelled and a ``timeout`` error is raised.
    """
    settings = settings or get_settings()
    if timeout is None:
        return await _extract(url, settings, fetcher, sleep)
    try:
        return await asyncio.wait_for(_extract(url, settings, fetcher, sleep), timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("Recipe extraction for %s exceeded %.1fs deadline", url, timeout)
        raise ExtractionError(ErrorKind.TIMEOUT, detail=f"Extraction exceeded {timeout}s deadline") from exc
