import httpx
import pytest
import respx

from app.core.config import Settings, get_settings
from app.main import app
from tests.factories import PSI_ENDPOINT, psi_payload


def test_missing_url_returns_400_without_upstream_call(client):
    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(PSI_ENDPOINT)
        r = client.get("/api/seo-check")

    assert r.status_code == 400
    assert r.json() == {"error": "Missing URL or API key"}
    assert not route.called


def test_empty_url_returns_400(client):
    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(PSI_ENDPOINT)
        r = client.get("/api/seo-check", params={"url": ""})

    assert r.status_code == 400
    assert not route.called


def test_missing_api_key_returns_400(client):
    app.dependency_overrides[get_settings] = lambda: Settings(PAGESPEED_API_KEY=None, _env_file=None)

    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(PSI_ENDPOINT)
        r = client.get("/api/seo-check", params={"url": "https://example.com"})

    assert r.status_code == 400
    assert r.json() == {"error": "Missing URL or API key"}
    assert not route.called


def test_forwards_url_key_and_strategy_and_relays_body(client):
    payload = psi_payload()

    with respx.mock:
        route = respx.get(PSI_ENDPOINT).respond(200, json=payload)
        r = client.get("/api/seo-check", params={"url": "https://example.com/a b", "strategy": "desktop"})

    assert r.status_code == 200
    assert r.json() == payload

    params = route.calls.last.request.url.params
    assert params["url"] == "https://example.com/a b"
    assert params["key"] == "fake-key"
    assert params["strategy"] == "desktop"


def test_strategy_is_not_validated(client):
    with respx.mock:
        route = respx.get(PSI_ENDPOINT).respond(200, json={})
        r = client.get("/api/seo-check", params={"url": "https://example.com", "strategy": "tablet"})

    assert r.status_code == 200
    assert route.calls.last.request.url.params["strategy"] == "tablet"


def test_strategy_omitted_when_not_given(client):
    with respx.mock:
        route = respx.get(PSI_ENDPOINT).respond(200, json={})
        client.get("/api/seo-check", params={"url": "https://example.com"})

    assert "strategy" not in route.calls.last.request.url.params


def test_network_failure_returns_500(client):
    with respx.mock:
        respx.get(PSI_ENDPOINT).mock(side_effect=httpx.ConnectError("boom"))
        r = client.get("/api/seo-check", params={"url": "https://example.com"})

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch from PageSpeed API"}


@pytest.mark.parametrize("status", [400, 429, 500, 503])
def test_upstream_error_status_returns_500(client, status):
    with respx.mock:
        respx.get(PSI_ENDPOINT).respond(status, json={"error": {"message": "quota"}})
        r = client.get("/api/seo-check", params={"url": "https://example.com"})

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch from PageSpeed API"}


def test_invalid_json_returns_500(client):
    with respx.mock:
        respx.get(PSI_ENDPOINT).respond(200, text="<html>not json</html>")
        r = client.get("/api/seo-check", params={"url": "https://example.com"})

    assert r.status_code == 500
