import httpx
import pytest

from helpers import PROXY_ROUTES, make_route_transport
from recipe_harvester.app.services.url_parsing.errors import ErrorKind, FetchError
from recipe_harvester.app.services.url_parsing.html_fetcher import (
    ProxyFetcher,
    RouteFailure,
    build_proxy_url,
    check_page_content,
)
from recipe_harvester.app.services.url_parsing.models import FetchOutcome

TARGET = "https://www.example.com/recipes/stir-fry?print=1"
RECIPE_HTML = "<html><body><h1>Stir Fry</h1></body></html>"


def test_build_proxy_url_encodes_target():
    proxy_url = build_proxy_url("https://proxy.test/raw?url={url}", "https://ex.com/a?b=1")
    assert proxy_url == "https://proxy.test/raw?url=https%3A%2F%2Fex.com%2Fa%3Fb%3D1"


def test_build_proxy_url_appends_without_placeholder():
    assert build_proxy_url("https://proxy.test/fetch/", "https://ex.com/") == "https://proxy.test/fetch/https%3A%2F%2Fex.com%2F"


@pytest.mark.parametrize(
    "body,reason",
    [
        ("", "empty"),
        ("   \n ", "empty"),
        ("<h1>ACCESS DENIED</h1>", "blocked"),
        ("<title>403 Forbidden</title>", "blocked"),
        ("Rate Limit Exceeded. Slow down.", "rate_limited"),
    ],
)
def test_check_page_content_rejects(body, reason):
    with pytest.raises(RouteFailure) as excinfo:
        check_page_content(body)
    assert excinfo.value.reason == reason


def test_requires_routes():
    with pytest.raises(ValueError):
        ProxyFetcher([])


@pytest.mark.asyncio
async def test_falls_back_in_route_order():
    calls = []
    transport = make_route_transport(
        {
            "proxy-one.test": (200, "<p>Access denied</p>"),
            "proxy-two.test": (200, "<p>Rate limit exceeded</p>"),
            "proxy-three.test": (200, RECIPE_HTML),
        },
        calls,
    )
    fetcher = ProxyFetcher(PROXY_ROUTES, transport=transport)
    attempts = []

    html = await fetcher.fetch(TARGET, attempts=attempts)

    assert html == RECIPE_HTML
    assert [httpx.URL(c).host for c in calls] == ["proxy-one.test", "proxy-two.test", "proxy-three.test"]
    assert [a.outcome for a in attempts] == [FetchOutcome.ERROR, FetchOutcome.ERROR, FetchOutcome.SUCCESS]
    assert [a.route for a in attempts] == PROXY_ROUTES


@pytest.mark.asyncio
async def test_stops_at_first_success():
    calls = []
    transport = make_route_transport({"proxy-one.test": (200, RECIPE_HTML)}, calls)
    fetcher = ProxyFetcher(PROXY_ROUTES, transport=transport)

    assert await fetcher.fetch(TARGET) == RECIPE_HTML
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_all_routes_failing_aggregates_errors_in_order():
    transport = make_route_transport(
        {
            "proxy-one.test": (403, "Forbidden"),
            "proxy-two.test": (500, "oops"),
            "proxy-three.test": lambda request: httpx.ConnectError("connection refused", request=request),
        }
    )
    fetcher = ProxyFetcher(PROXY_ROUTES, transport=transport)

    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch(TARGET, attempt_number=2)

    error = excinfo.value
    assert error.kind == ErrorKind.ALL_PROXIES_FAILED
    assert error.message.startswith("All 3 proxy services failed. Errors: ")
    details = error.message.split("Errors: ", 1)[1].split("; ")
    assert len(details) == 3
    assert details[0].startswith(PROXY_ROUTES[0] + ": HTTP 403")
    assert details[1].startswith(PROXY_ROUTES[1] + ": HTTP 500")
    assert details[2].startswith(PROXY_ROUTES[2] + ": Network error")
    assert [a.attempt_number for a in error.attempts] == [2, 2, 2]


@pytest.mark.asyncio
async def test_all_routes_throttled_is_rate_limited():
    transport = make_route_transport(
        {
            "proxy-one.test": (429, "slow down"),
            "proxy-two.test": (200, "Rate limit exceeded"),
            "proxy-three.test": (429, "slow down"),
        }
    )
    fetcher = ProxyFetcher(PROXY_ROUTES, transport=transport)

    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch(TARGET)
    assert excinfo.value.kind == ErrorKind.RATE_LIMITED


@pytest.mark.asyncio
async def test_all_routes_timing_out_is_timeout():
    transport = make_route_transport(
        {host: (lambda request: httpx.ReadTimeout("read timed out", request=request))
         for host in ("proxy-one.test", "proxy-two.test", "proxy-three.test")}
    )
    fetcher = ProxyFetcher(PROXY_ROUTES, timeout=0.5, transport=transport)

    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch(TARGET)
    assert excinfo.value.kind == ErrorKind.TIMEOUT
    assert "Request timed out" in excinfo.value.message


@pytest.mark.asyncio
async def test_sends_browser_headers(settings):
    seen = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["User-Agent"]
        return httpx.Response(200, text=RECIPE_HTML)

    fetcher = ProxyFetcher.from_settings(settings, transport=httpx.MockTransport(handler))
    await fetcher.fetch(TARGET)
    assert seen["user_agent"] == settings.scraper_user_agent
    assert fetcher.timeout == settings.fetch_timeout_seconds
