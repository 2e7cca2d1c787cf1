import json

import httpx

PROXY_ROUTES = [
    "https://proxy-one.test/raw?url={url}",
    "https://proxy-two.test/fetch/{url}",
    "https://proxy-three.test/{url}",
]

STIR_FRY = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Stir Fry",
    "recipeIngredient": ["1 cup rice", "2 tbsp soy sauce"],
    "recipeInstructions": ["Cook rice", "Add sauce"],
}


def make_route_transport(responses: dict, calls: list = None) -> httpx.MockTransport:
    """Answer each proxy host with a fixed (status, body) pair, or raise from an exception factory."""

    async def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        outcome = responses[request.url.host]
        if callable(outcome):
            raise outcome(request)
        status, body = outcome
        return httpx.Response(status, text=body, headers={"content-type": "text/html"})

    return httpx.MockTransport(handler)


class FakeFetcher:
    """Stands in for ProxyFetcher, replaying one outcome per call."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def fetch(self, url, attempt_number=1, attempts=None):
        self.calls.append((url, attempt_number))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def json_ld_page(*blocks, body: str = "") -> str:
    scripts = "\n".join(
        f'<script type="application/ld+json">{b if isinstance(b, str) else json.dumps(b)}</script>'
        for b in blocks
    )
    return f"<html><head>{scripts}</head><body>{body}</body></html>"
