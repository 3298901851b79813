"""
Parse raw query-string values into a validated SearchRequest.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from domain.models import MapsQuery, SearchRequest, SearchType
from services.errors import InvalidSearchRequest
from services.flights import parse_flight_query

# Used when the browser does not share its location (midtown Manhattan).
DEFAULT_MAPS_LAT = 40.7455096
DEFAULT_MAPS_LNG = -74.0083012
DEFAULT_MAPS_ZOOM = "14z"

_ZOOM_RE = re.compile(r"^(\d+(?:\.\d+)?)z?$")


def _parse_search_type(value: Optional[str]) -> SearchType:
    if value is None or not value.strip():
        return SearchType.WEB
    try:
        return SearchType(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(t.value for t in SearchType)
        raise InvalidSearchRequest(f"Invalid search type '{value}'. Use one of: {allowed}.") from exc


def _parse_page(value: Optional[str]) -> int:
    if value is None or not value.strip():
        return 1
    try:
        page = int(value.strip())
    except ValueError as exc:
        raise InvalidSearchRequest("Page must be a positive integer.") from exc
    if page < 1:
        raise InvalidSearchRequest("Page must be a positive integer.")
    return page


def _parse_coordinate(value: str, label: str, limit: float) -> float:
    try:
        coord = float(value.strip())
    except ValueError as exc:
        raise InvalidSearchRequest(f"Invalid {label}: must be a number.") from exc
    if not -limit <= coord <= limit:
        raise InvalidSearchRequest(f"Invalid {label}: must be between -{limit:g} and {limit:g}.")
    return coord


def parse_maps_query(
    lat: Optional[str],
    lng: Optional[str],
    zoom: Optional[str] = None,
) -> MapsQuery:
    has_lat = bool(lat and lat.strip())
    has_lng = bool(lng and lng.strip())
    if has_lat != has_lng:
        raise InvalidSearchRequest("Both lat and lng are required when either is given.")

    if has_lat:
        latitude = _parse_coordinate(lat, "latitude", 90.0)  # type: ignore[arg-type]
        longitude = _parse_coordinate(lng, "longitude", 180.0)  # type: ignore[arg-type]
    else:
        latitude, longitude = DEFAULT_MAPS_LAT, DEFAULT_MAPS_LNG

    zoom_value = DEFAULT_MAPS_ZOOM
    if zoom and zoom.strip():
        match = _ZOOM_RE.match(zoom.strip().lower())
        if not match or not 1 <= float(match.group(1)) <= 21:
            raise InvalidSearchRequest("Invalid zoom: use a level between 1z and 21z.")
        zoom_value = f"{match.group(1)}z"

    return MapsQuery(lat=latitude, lng=longitude, zoom=zoom_value)


def parse_search_request(
    q: Optional[str],
    search_type: Optional[str] = None,
    page: Optional[str] = None,
    *,
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
    today: Optional[date] = None,
) -> SearchRequest:
    if q is None or not q.strip():
        raise InvalidSearchRequest("Query parameter is required")

    kind = _parse_search_type(search_type)
    request = SearchRequest(query=q.strip(), search_type=kind, page=_parse_page(page))

    if kind == SearchType.MAPS:
        request.maps = parse_maps_query(lat, lng, zoom)
    elif kind == SearchType.FLIGHTS:
        request.flights = parse_flight_query(
            departure_id,
            arrival_id,
            outbound_date,
            return_date=return_date,
            flight_type=flight_type,
            travel_class=travel_class,
            adults=adults,
            today=today,
        )
    return request
