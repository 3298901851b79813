"""
Search orchestration: one validated request in, one provider call, one page out.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

from domain.models import SearchPage, SearchRequest, SearchResult, SearchType
from services.errors import InvalidSearchRequest
from services.normalizers import (
    GENERAL_NORMALIZERS,
    extract_time_taken,
    extract_total_results,
    normalize_books,
    normalize_finance,
    normalize_flights,
)
from services.pagination import build_search_metadata, slice_page
from services.search_request import parse_maps_query
from services.providers import (
    OpenLibraryClient,
    SerpApiClient,
    get_default_open_library_client,
    get_default_serpapi_client,
)
from settings import settings


class SearchService:
    def __init__(
        self,
        serpapi: Optional[SerpApiClient] = None,
        open_library: Optional[OpenLibraryClient] = None,
    ):
        self.serpapi = serpapi or get_default_serpapi_client()
        self.open_library = open_library or get_default_open_library_client()
        self.logger = logging.getLogger(__name__)

    def search(self, request: SearchRequest) -> SearchPage:
        kind = request.search_type
        self.logger.info("Search type=%s page=%d q=%r", kind.value, request.page, request.query)

        if kind == SearchType.BOOKS:
            results, total, elapsed = self._search_books(request)
        elif kind == SearchType.FLIGHTS:
            results, total, elapsed = self._search_flights(request)
        elif kind == SearchType.FINANCE:
            results, total, elapsed = self._search_finance(request)
        else:
            results, total, elapsed = self._search_general(request)

        self.logger.info(
            "Search type=%s page=%d returned %d results (total=%s)",
            kind.value,
            request.page,
            len(results),
            total,
        )
        metadata = build_search_metadata(total, request.page, elapsed, kind)
        return SearchPage(results=results, metadata=metadata, search_type=kind)

    def _search_general(self, request: SearchRequest) -> Tuple[List[SearchResult], Any, float]:
        kind = request.search_type
        if kind == SearchType.MAPS:
            maps = request.maps or parse_maps_query(None, None)
            params = self.serpapi.maps_params(request.query, maps, request.page)
        else:
            params = self.serpapi.general_params(request.query, kind, request.page)
        payload = self.serpapi.fetch(params)
        results = GENERAL_NORMALIZERS[kind](payload)
        self._log_if_empty(results, payload)
        return results, extract_total_results(payload, len(results)), extract_time_taken(payload)

    def _search_finance(self, request: SearchRequest) -> Tuple[List[SearchResult], Any, float]:
        payload = self.serpapi.fetch(self.serpapi.finance_params(request.query))
        results = normalize_finance(payload, request.query)
        self._log_if_empty(results, payload)
        # Quote pages are not paginated upstream; page the cards locally
        return slice_page(results, request.page), str(len(results)), extract_time_taken(payload)

    def _search_flights(self, request: SearchRequest) -> Tuple[List[SearchResult], Any, float]:
        if request.flights is None:
            raise InvalidSearchRequest("Flight details are required.")
        payload = self.serpapi.fetch(self.serpapi.flights_params(request.flights))
        itineraries = normalize_flights(payload, settings.SEARCH_CURRENCY)
        self._log_if_empty(itineraries, payload)
        return (
            slice_page(itineraries, request.page),
            str(len(itineraries)),
            extract_time_taken(payload),
        )

    def _search_books(self, request: SearchRequest) -> Tuple[List[SearchResult], Any, float]:
        started = time.perf_counter()
        payload = self.open_library.search(request.query, request.page)
        elapsed = round(time.perf_counter() - started, 2)
        results = normalize_books(payload)
        self._log_if_empty(results, payload)
        total = payload.get("numFound", payload.get("num_found"))
        if total is None:
            total = len(results)
        return results, str(total), elapsed

    def _log_if_empty(self, results: List[SearchResult], payload: Dict[str, Any]) -> None:
        if not results:
            self.logger.debug("No results found; payload keys: %s", sorted(payload.keys()))


_default_search_service: Optional[SearchService] = None


def get_default_search_service() -> SearchService:
    global _default_search_service
    if _default_search_service is None:
        _default_search_service = SearchService()
    return _default_search_service
