"""
Flight search input validation.

Turns the raw flight form fields into a FlightQuery: airports resolved to
codes, dates parsed and ordered, enums checked.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from domain.models import FlightQuery, FlightType, TravelClass
from services.airports import resolve_airport_code
from services.errors import InvalidSearchRequest

MAX_ADULTS = 9


def _parse_date(value: str, label: str) -> date:
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidSearchRequest(f"Invalid {label} date: expected YYYY-MM-DD.") from exc


def _parse_flight_type(value: Optional[str]) -> FlightType:
    if value is None or not value.strip():
        return FlightType.ROUND_TRIP
    try:
        return FlightType(value.strip())
    except ValueError as exc:
        raise InvalidSearchRequest("Invalid flight type: use 1 (round trip) or 2 (one way).") from exc


def _parse_travel_class(value: Optional[str]) -> TravelClass:
    if value is None or not value.strip():
        return TravelClass.ECONOMY
    try:
        return TravelClass(value.strip())
    except ValueError as exc:
        raise InvalidSearchRequest("Invalid travel class: use 1 (economy) through 4 (first).") from exc


def _parse_adults(value: Optional[str]) -> int:
    if value is None or not value.strip():
        return 1
    try:
        adults = int(value.strip())
    except ValueError as exc:
        raise InvalidSearchRequest("Number of adults must be a whole number.") from exc
    if not 1 <= adults <= MAX_ADULTS:
        raise InvalidSearchRequest(f"Number of adults must be between 1 and {MAX_ADULTS}.")
    return adults


def parse_flight_query(
    departure_id: Optional[str],
    arrival_id: Optional[str],
    outbound_date: Optional[str],
    return_date: Optional[str] = None,
    flight_type: Optional[str] = None,
    travel_class: Optional[str] = None,
    adults: Optional[str] = None,
    today: Optional[date] = None,
) -> FlightQuery:
    today = today or date.today()

    departure = resolve_airport_code(departure_id, "departure")
    arrival = resolve_airport_code(arrival_id, "arrival")
    if departure == arrival:
        raise InvalidSearchRequest("Departure and arrival airports must be different.")

    trip_type = _parse_flight_type(flight_type)
    cabin = _parse_travel_class(travel_class)
    passengers = _parse_adults(adults)

    if not outbound_date or not outbound_date.strip():
        raise InvalidSearchRequest("Please select a departure date.")
    outbound = _parse_date(outbound_date, "departure")
    if outbound < today:
        raise InvalidSearchRequest("Departure date cannot be in the past.")

    inbound: Optional[date] = None
    if trip_type == FlightType.ROUND_TRIP:
        if not return_date or not return_date.strip():
            raise InvalidSearchRequest("Please select a return date for round trip.")
        inbound = _parse_date(return_date, "return")
        if inbound <= outbound:
            raise InvalidSearchRequest("Return date must be after departure date.")

    return FlightQuery(
        departure_id=departure,
        arrival_id=arrival,
        outbound_date=outbound,
        return_date=inbound,
        flight_type=trip_type,
        travel_class=cabin,
        adults=passengers,
    )
