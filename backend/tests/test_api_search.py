from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import search as search_router
from settings import settings


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(search_router.router, prefix="/api")
    return TestClient(app)


@pytest.fixture
def api_key():
    with patch.object(settings, "SERPAPI_KEY", "test-key"):
        yield


def _response(payload, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = ""
    resp.json.return_value = payload
    return resp


def _sent_params(mock_get):
    return mock_get.call_args.kwargs["params"]


def test_missing_query_returns_400(client):
    resp = client.get("/api/search")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Query parameter is required"}


def test_invalid_page_returns_400(client):
    resp = client.get("/api/search", params={"q": "x", "page": "zero"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_missing_api_key_returns_500(client):
    with patch.object(settings, "SERPAPI_KEY", None):
        resp = client.get("/api/search", params={"q": "python"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "SerpAPI key not configured"


@patch("services.http_client._session.get")
def test_web_search_returns_normalized_page(mock_get, client, api_key):
    mock_get.return_value = _response(
        {
            "search_metadata": {"total_time_taken": 0.87},
            "search_information": {"total_results": 1230000},
            "organic_results": [{"position": 21, "title": "Python", "link": "https://python.org"}],
        }
    )
    resp = client.get("/api/search", params={"q": "python", "page": "2"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["search_type"] == "web"
    assert data["results"] == [{"position": 21, "title": "Python", "link": "https://python.org"}]
    assert data["search_metadata"] == {
        "total_results": "1230000",
        "time_taken_displayed": 0.87,
        "search_type": "web",
        "current_page": 2,
        "total_pages": 10,
        "has_next_page": True,
        "has_prev_page": True,
        "results_per_page": 20,
    }

    params = _sent_params(mock_get)
    assert params["engine"] == "google"
    assert params["q"] == "python"
    assert params["api_key"] == "test-key"
    assert params["num"] == 20
    assert params["start"] == 20


@patch("services.http_client._session.get")
def test_images_search_sets_vertical(mock_get, client, api_key):
    mock_get.return_value = _response({"images_results": [{"title": "a", "original": "https://i/a.png"}]})
    resp = client.get("/api/search", params={"q": "cats", "type": "images"})
    assert resp.status_code == 200
    params = _sent_params(mock_get)
    assert params["tbm"] == "isch"
    assert params["num"] == 30
    assert "start" not in params
    # No provider total: falls back to the returned count
    assert resp.json()["search_metadata"]["total_results"] == "1"


@patch("services.http_client._session.get")
def test_maps_search_sends_viewport(mock_get, client, api_key):
    mock_get.return_value = _response({"local_results": [{"title": "Cafe", "place_id": "p1"}]})
    resp = client.get("/api/search", params={"q": "cafe", "type": "maps", "lat": "40.7", "lng": "-74", "zoom": "14z"})
    assert resp.status_code == 200
    params = _sent_params(mock_get)
    assert params["engine"] == "google_maps"
    assert params["type"] == "search"
    assert params["ll"] == "@40.7,-74.0,14z"
    assert resp.json()["results"][0]["place_id"] == "p1"


@patch("services.http_client._session.get")
def test_books_search_uses_open_library_without_key(mock_get, client):
    mock_get.return_value = _response({"numFound": 41, "docs": [{"key": "/works/OL1W", "title": "Dune"}]})
    with patch.object(settings, "SERPAPI_KEY", None):
        resp = client.get("/api/search", params={"q": "dune", "type": "books", "page": "3"})
    assert resp.status_code == 200
    url = mock_get.call_args.args[0]
    assert url.endswith("/search.json")
    params = _sent_params(mock_get)
    assert params["page"] == 3
    assert params["limit"] == 20
    meta = resp.json()["search_metadata"]
    assert meta["total_results"] == "41"
    assert meta["total_pages"] == 3
    assert meta["has_next_page"] is False


@patch("services.http_client._session.get")
def test_finance_search(mock_get, client, api_key):
    mock_get.return_value = _response({"summary": {"title": "Apple Inc", "stock": "AAPL", "exchange": "NASDAQ",
                                                   "price": "$190.00"}})
    resp = client.get("/api/search", params={"q": "AAPL:NASDAQ", "type": "finance"})
    assert resp.status_code == 200
    assert _sent_params(mock_get)["engine"] == "google_finance"
    assert resp.json()["results"][0]["price"] == "$190.00"


@patch("services.http_client._session.get")
def test_finance_cards_are_paged_locally(mock_get, client, api_key):
    payload = {
        "summary": {"title": "Apple Inc", "stock": "AAPL", "exchange": "NASDAQ", "price": "$190.00"},
        "news_results": [{"title": f"Story {i}", "link": f"https://news.example.com/{i}"} for i in range(30)],
    }
    mock_get.return_value = _response(payload)

    first = client.get("/api/search", params={"q": "AAPL:NASDAQ", "type": "finance"}).json()
    second = client.get("/api/search", params={"q": "AAPL:NASDAQ", "type": "finance", "page": "2"}).json()

    assert len(first["results"]) == 20
    assert first["results"][0]["price"] == "$190.00"
    assert first["search_metadata"]["total_pages"] == 2
    assert first["search_metadata"]["has_next_page"] is True
    assert len(second["results"]) == 11
    assert second["results"][0]["title"] == "Story 19"
    assert second["search_metadata"]["has_next_page"] is False


@patch("services.http_client._session.get")
def test_flights_search_round_trip(mock_get, client, api_key):
    outbound = date.today() + timedelta(days=7)
    inbound = date.today() + timedelta(days=14)
    mock_get.return_value = _response({"best_flights": [{"flights": [], "price": 300}] * 25})
    resp = client.get(
        "/api/search",
        params={
            "q": "trip",
            "type": "flights",
            "departure_id": "Chicago",
            "arrival_id": "Paris",
            "outbound_date": outbound.isoformat(),
            "return_date": inbound.isoformat(),
            "flight_type": "1",
            "travel_class": "2",
            "adults": "2",
        },
    )
    assert resp.status_code == 200
    params = _sent_params(mock_get)
    assert params["engine"] == "google_flights"
    assert params["departure_id"] == "ORD"
    assert params["arrival_id"] == "CDG"
    assert params["return_date"] == inbound.isoformat()
    assert params["type"] == "1"
    assert params["travel_class"] == "2"
    assert params["adults"] == 2
    data = resp.json()
    assert len(data["results"]) == 20
    assert data["search_metadata"]["total_results"] == "25"
    assert data["search_metadata"]["has_next_page"] is True


def test_flights_return_before_departure_returns_400(client, api_key):
    outbound = date.today() + timedelta(days=7)
    resp = client.get(
        "/api/search",
        params={
            "q": "trip",
            "type": "flights",
            "departure_id": "JFK",
            "arrival_id": "LAX",
            "outbound_date": outbound.isoformat(),
            "return_date": outbound.isoformat(),
        },
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Return date must be after departure date."}


@pytest.mark.parametrize(
    "status, expected_status, expected_error",
    [
        (401, 401, "Invalid SerpAPI key"),
        (429, 429, "API rate limit exceeded. Please try again later."),
        (400, 400, "Invalid search parameters"),
        (502, 500, "Search failed"),
    ],
)
@patch("services.http_client._session.get")
def test_provider_errors_map_to_status(mock_get, client, api_key, status, expected_status, expected_error):
    mock_get.return_value = _response({"error": "nope"}, status_code=status)
    resp = client.get("/api/search", params={"q": "python"})
    assert resp.status_code == expected_status
    assert resp.json()["error"] == expected_error


@patch("services.http_client._session.get")
def test_provider_timeout_returns_408(mock_get, client, api_key):
    mock_get.side_effect = requests.Timeout()
    resp = client.get("/api/search", params={"q": "python", "type": "news"})
    assert resp.status_code == 408
    assert resp.json()["error"] == "Search request timed out"


@patch("services.http_client._session.get")
def test_embedded_no_results_error_is_empty_page(mock_get, client, api_key):
    mock_get.return_value = _response({"error": "Google hasn't returned any results for this query."})
    resp = client.get("/api/search", params={"q": "qwertyuiopasdf"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["results"] == []
    assert data["search_metadata"]["total_pages"] == 0


@patch("services.http_client._session.get")
def test_embedded_other_error_is_500(mock_get, client, api_key):
    mock_get.return_value = _response({"error": "Unsupported location"})
    resp = client.get("/api/search", params={"q": "python"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Search failed", "details": "Unsupported location"}


def test_airport_suggestions(client):
    resp = client.get("/api/airports", params={"q": "lon", "limit": 2})
    assert resp.status_code == 200
    assert [a["code"] for a in resp.json()] == ["LHR", "LGW"]


def test_airport_suggestions_short_input(client):
    resp = client.get("/api/airports", params={"q": "l"})
    assert resp.status_code == 200
    assert resp.json() == []
