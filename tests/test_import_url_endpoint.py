from recipe_harvester.app.services import url_recipe_parser
from recipe_harvester.app.services.url_parsing.errors import ErrorKind, ExtractionError
from recipe_harvester.app.services.url_parsing.models import RecipeDraft, number_lines


def _draft():
    return RecipeDraft(
        title="Stir Fry",
        ingredients=number_lines(["1 cup rice", "2 tbsp soy sauce"]),
        instructions=number_lines(["Cook rice", "Add sauce"]),
        source_url="https://www.example.com/stir-fry",
        strategy="schema_org_json_ld",
    )


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_import_url_returns_draft(monkeypatch, client):
    async def fake_extract(url, **kwargs):
        assert url == "https://www.example.com/stir-fry"
        return _draft()

    monkeypatch.setattr(url_recipe_parser, "extract", fake_extract)

    response = client.post("/recipes/import/url", json={"url": "https://www.example.com/stir-fry"})
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Stir Fry"
    assert body["ingredients"] == [{"ordinal": 1, "text": "1 cup rice"}, {"ordinal": 2, "text": "2 tbsp soy sauce"}]
    assert body["metadata"]["category"] == "main"
    assert body["metadata"]["difficulty"] == "medium"


def test_import_url_maps_errors(monkeypatch, client):
    expectations = {
        ErrorKind.INVALID_INPUT: 400,
        ErrorKind.ALL_PROXIES_FAILED: 502,
        ErrorKind.TIMEOUT: 504,
        ErrorKind.RATE_LIMITED: 429,
        ErrorKind.NO_STRUCTURED_DATA: 422,
        ErrorKind.TITLE_NOT_FOUND: 422,
        ErrorKind.INCOMPLETE_RESULT: 422,
        ErrorKind.UNKNOWN: 500,
    }
    for kind, status_code in expectations.items():

        async def fake_extract(url, kind=kind, **kwargs):
            raise ExtractionError(kind, detail="boom")

        monkeypatch.setattr(url_recipe_parser, "extract", fake_extract)

        response = client.post("/recipes/import/url", json={"url": "https://www.example.com/x"})
        assert response.status_code == status_code
        body = response.json()
        assert body["error_code"] == kind.value
        assert body["message"]
        assert body["suggestion"]
        assert body["details"] == "boom"


def test_import_url_requires_url(client):
    response = client.post("/recipes/import/url", json={})
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "invalid_input"
    assert body["details"][0]["field"] == "body.url"


def test_import_url_rejects_non_string_url(client):
    response = client.post("/recipes/import/url", json={"url": 42})
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "invalid_input"
    assert body["retryable"] is False
    assert body["suggestion"]
    assert body["details"][0]["field"] == "body.url"
