"""HTML fetching through an ordered chain of proxy routes."""

import logging
from typing import List, Optional, Sequence
from urllib.parse import quote

import httpx

from recipe_harvester.app.services.url_parsing.constants import (
    BLOCK_PAGE_SIGNATURES,
    DEFAULT_USER_AGENT,
    RATE_LIMIT_SIGNATURES,
)
from recipe_harvester.app.services.url_parsing.errors import ErrorKind, FetchError
from recipe_harvester.app.services.url_parsing.models import FetchAttempt, FetchOutcome

logger = logging.getLogger(__name__)


class RouteFailure(Exception):
    """A single proxy route did not return usable content."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


def build_proxy_url(route: str, url: str) -> str:
    """Substitute the percent-encoded target URL into a route template."""
    encoded = quote(url, safe="")
    if "{url}" in route:
        return route.replace("{url}", encoded)
    return route + encoded


def check_page_content(html: str) -> str:
    """Reject empty bodies and known block pages."""
    if not html or not html.strip():
        raise RouteFailure("empty", "Empty response received")
    lowered = html.lower()
    if any(signature in lowered for signature in BLOCK_PAGE_SIGNATURES):
        if any(signature in lowered for signature in RATE_LIMIT_SIGNATURES):
            raise RouteFailure("rate_limited", "Rate limit exceeded page received")
        raise RouteFailure("blocked", "Access denied page received")
    return html


class ProxyFetcher:
    """
    Fetches page HTML through proxy routes, one route at a time.

    Routes are tried strictly in list order with a single request each. The
    first route returning non-empty, non-blocked content wins. Retrying the
    whole chain is left to the caller.
    """

    def __init__(
        self,
        routes: Sequence[str],
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not routes:
            raise ValueError("At least one proxy route is required")
        self.routes = list(routes)
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ProxyFetcher":
        return cls(
            settings.proxy_routes,
            timeout=settings.fetch_timeout_seconds,
            user_agent=settings.scraper_user_agent,
            transport=transport,
        )

    async def _fetch_route(self, route: str, url: str) -> str:
        proxy_url = build_proxy_url(route, url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=self.headers,
                transport=self.transport,
            ) as client:
                response = await client.get(proxy_url)
        except httpx.TimeoutException as exc:
            raise RouteFailure("timeout", f"Request timed out ({type(exc).__name__})") from exc
        except httpx.HTTPError as exc:
            raise RouteFailure("network", f"Network error: {exc}") from exc

        if not response.is_success:
            reason = "rate_limited" if response.status_code == 429 else "http_status"
            raise RouteFailure(reason, f"HTTP {response.status_code}: {response.reason_phrase}")
        return check_page_content(response.text)

    async def fetch(
        self,
        url: str,
        attempt_number: int = 1,
        attempts: Optional[List[FetchAttempt]] = None,
    ) -> str:
        """Return the first usable page body, or raise FetchError naming every route."""
        if attempts is None:
            attempts = []
        errors: List[str] = []
        reasons: List[str] = []

        for route in self.routes:
            logger.debug("Trying proxy route %s for %s (attempt %d)", route, url, attempt_number)
            try:
                html = await self._fetch_route(route, url)
            except RouteFailure as exc:
                logger.warning("Proxy route %s failed: %s", route, exc)
                errors.append(f"{route}: {exc}")
                reasons.append(exc.reason)
                attempts.append(
                    FetchAttempt(
                        route=route,
                        attempt_number=attempt_number,
                        outcome=FetchOutcome.ERROR,
                        error_detail=str(exc),
                        reason=exc.reason,
                    )
                )
                continue

            attempts.append(
                FetchAttempt(route=route, attempt_number=attempt_number, outcome=FetchOutcome.SUCCESS)
            )
            logger.debug("Fetched %d characters via proxy route %s", len(html), route)
            return html

        if all(reason == "rate_limited" for reason in reasons):
            kind = ErrorKind.RATE_LIMITED
        elif all(reason == "timeout" for reason in reasons):
            kind = ErrorKind.TIMEOUT
        else:
            kind = ErrorKind.ALL_PROXIES_FAILED
        message = f"All {len(self.routes)} proxy services failed. Errors: {'; '.join(errors)}"
        failed = [a for a in attempts if a.attempt_number == attempt_number]
        raise FetchError(kind, message, attempts=failed)
