"""
Search API routes.

Proxies a UI query to one provider and returns normalized, paginated results.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from services.airports import get_airport_suggestions
from services.errors import ProviderError, SearchError
from services.search_request import parse_search_request
from services.search_service import get_default_search_service

router = APIRouter()
logger = logging.getLogger(__name__)


class SearchMetadataResponse(BaseModel):
    total_results: str
    time_taken_displayed: float
    search_type: str
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    results_per_page: int


class SearchResponse(BaseModel):
    results: List[Dict[str, Any]]
    search_metadata: SearchMetadataResponse
    search_type: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class AirportResponse(BaseModel):
    code: str
    name: str
    city: str
    country: str


def error_response(exc: SearchError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse},
               408: {"model": ErrorResponse}, 429: {"model": ErrorResponse},
               500: {"model": ErrorResponse}},
)
def search(
    q: Optional[str] = None,
    type: Optional[str] = Query(default=None, description="web, images, videos, news, shopping, maps, books, flights or finance"),
    page: Optional[str] = None,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    zoom: Optional[str] = None,
    departure_id: Optional[str] = None,
    arrival_id: Optional[str] = None,
    outbound_date: Optional[str] = None,
    return_date: Optional[str] = None,
    flight_type: Optional[str] = None,
    travel_class: Optional[str] = None,
    adults: Optional[str] = None,
):
    """
    Run a search against the provider for the requested category.

    All parameters arrive as strings and are validated here so that bad input
    is reported as a 400 with an ``error`` message rather than a 422.
    """
    try:
        request = parse_search_request(
            q,
            type,
            page,
            lat=lat,
            lng=lng,
            zoom=zoom,
            departure_id=departure_id,
            arrival_id=arrival_id,
            outbound_date=outbound_date,
            return_date=return_date,
            flight_type=flight_type,
            travel_class=travel_class,
            adults=adults,
        )
        result_page = get_default_search_service().search(request)
    except SearchError as exc:
        logger.warning(
            "Search failed: type=%s page=%s q=%r status=%d error=%s details=%s",
            type,
            page,
            q,
            exc.status_code,
            exc.message,
            exc.details,
        )
        return error_response(exc)
    except Exception as exc:
        logger.exception("Unexpected search failure: type=%s page=%s q=%r", type, page, q)
        return error_response(ProviderError(details=str(exc)))

    return result_page.to_dict()


@router.get("/airports", response_model=List[AirportResponse])
def airport_suggestions(
    q: str = "",
    limit: int = Query(default=8, ge=1, le=20),
):
    """Autocomplete airports by code, city or name."""
    return [a.to_dict() for a in get_airport_suggestions(q, limit)]
