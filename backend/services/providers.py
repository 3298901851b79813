"""
Clients for the third-party data providers.

SerpApiClient covers the general, maps, finance and flights engines;
OpenLibraryClient covers the book catalog. Both only build parameters and
fetch JSON; reshaping happens in services.normalizers.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from domain.models import FlightQuery, FlightType, MapsQuery, SearchType
from services.errors import ConfigurationError, ProviderError
from services.http_client import provider_get
from services.pagination import RESULTS_PER_PAGE
from settings import settings

IMAGES_PER_PAGE = 30

# tbm values for the general engine's vertical searches
_VERTICALS = {
    SearchType.IMAGES: "isch",
    SearchType.VIDEOS: "vid",
    SearchType.NEWS: "nws",
    SearchType.SHOPPING: "shop",
}

# Embedded errors that only mean "nothing matched"
_NO_RESULTS_MARKERS = ("hasn't returned any results", "no results")


def start_index(page: int, per_page: int = RESULTS_PER_PAGE) -> int:
    return (page - 1) * per_page


class SerpApiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.SERPAPI_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.SEARCH_TIMEOUT_SECONDS
        self.logger = logging.getLogger(__name__)

    def _key(self) -> str:
        key = self.api_key or settings.SERPAPI_KEY
        if not key:
            raise ConfigurationError("SerpAPI key not configured")
        return key

    def base_params(self, query: str) -> Dict[str, Any]:
        return {
            "engine": "google",
            "q": query,
            "api_key": self._key(),
            "location": settings.SEARCH_LOCATION,
            "gl": settings.SEARCH_GL,
            "hl": settings.SEARCH_HL,
        }

    def general_params(self, query: str, search_type: SearchType, page: int) -> Dict[str, Any]:
        params = self.base_params(query)
        per_page = IMAGES_PER_PAGE if search_type == SearchType.IMAGES else RESULTS_PER_PAGE
        tbm = _VERTICALS.get(search_type)
        if tbm:
            params["tbm"] = tbm
        params["num"] = per_page
        if page > 1:
            params["start"] = start_index(page)
        return params

    def maps_params(self, query: str, maps: MapsQuery, page: int) -> Dict[str, Any]:
        params = self.base_params(query)
        params["engine"] = "google_maps"
        params["type"] = "search"
        params["ll"] = maps.ll
        # The maps engine rejects location when ll is given
        params.pop("location", None)
        if page > 1:
            params["start"] = start_index(page)
        return params

    def finance_params(self, query: str) -> Dict[str, Any]:
        return {
            "engine": "google_finance",
            "q": query,
            "api_key": self._key(),
            "hl": settings.SEARCH_HL,
        }

    def flights_params(self, flights: FlightQuery) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "engine": "google_flights",
            "api_key": self._key(),
            "departure_id": flights.departure_id,
            "arrival_id": flights.arrival_id,
            "outbound_date": flights.outbound_date.isoformat(),
            "type": flights.flight_type.value,
            "travel_class": flights.travel_class.value,
            "adults": flights.adults,
            "currency": settings.SEARCH_CURRENCY,
            "hl": settings.SEARCH_HL,
            "gl": settings.SEARCH_GL,
        }
        if flights.flight_type == FlightType.ROUND_TRIP and flights.return_date:
            params["return_date"] = flights.return_date.isoformat()
        return params

    def fetch(self, params: Dict[str, Any]) -> Dict[str, Any]:
        data = provider_get(
            self.base_url,
            params=params,
            timeout=self.timeout,
            provider="SerpAPI",
        )
        error = data.get("error")
        if error:
            message = str(error)
            if any(marker in message.lower() for marker in _NO_RESULTS_MARKERS):
                self.logger.info("SerpAPI reported no results: %s", message)
                return {"search_metadata": data.get("search_metadata") or {}}
            self.logger.warning("SerpAPI returned an error payload: %s", message)
            raise ProviderError(details=message)
        return data


class OpenLibraryClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.OPEN_LIBRARY_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.SEARCH_TIMEOUT_SECONDS

    def search_params(self, query: str, page: int) -> Dict[str, Any]:
        return {
            "q": query,
            "page": page,
            "limit": RESULTS_PER_PAGE,
            "fields": ",".join(
                [
                    "key",
                    "title",
                    "subtitle",
                    "author_name",
                    "first_publish_year",
                    "publisher",
                    "number_of_pages_median",
                    "isbn",
                    "cover_i",
                    "first_sentence",
                ]
            ),
        }

    def search(self, query: str, page: int) -> Dict[str, Any]:
        return provider_get(
            f"{self.base_url}/search.json",
            params=self.search_params(query, page),
            timeout=self.timeout,
            provider="Open Library",
        )


_default_serpapi_client: Optional[SerpApiClient] = None
_default_open_library_client: Optional[OpenLibraryClient] = None


def get_default_serpapi_client() -> SerpApiClient:
    global _default_serpapi_client
    if _default_serpapi_client is None:
        _default_serpapi_client = SerpApiClient()
    return _default_serpapi_client


def get_default_open_library_client() -> OpenLibraryClient:
    global _default_open_library_client
    if _default_open_library_client is None:
        _default_open_library_client = OpenLibraryClient()
    return _default_open_library_client
