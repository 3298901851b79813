"""
Per-provider response adapters.

Each provider answers in its own shape; the functions here reshape those
payloads into SearchResult records. Missing or malformed fields are skipped
rather than treated as errors.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote_plus, urlparse

from domain.models import (
    BookingOption,
    CarbonEmissions,
    FlightAirport,
    FlightSegment,
    GpsCoordinates,
    Layover,
    PriceMovement,
    SearchResult,
    SearchType,
)

OPEN_LIBRARY_SITE = "https://openlibrary.org"
OPEN_LIBRARY_COVERS = "https://covers.openlibrary.org/b/id"
GOOGLE_FINANCE_QUOTE_URL = "https://www.google.com/finance/quote"

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥", "CAD": "CA$", "AUD": "A$"}


def _str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _items(payload: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _domain(link: Optional[str]) -> Optional[str]:
    if not link:
        return None
    netloc = urlparse(link).netloc
    return netloc[4:] if netloc.startswith("www.") else (netloc or None)


def format_price(amount: Any, currency: str = "USD") -> Optional[str]:
    """Format a bare numeric price (e.g. ``482``) as ``"$482"``."""
    if isinstance(amount, str):
        return _str(amount)
    number = _float(amount)
    if number is None:
        return None
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    if number.is_integer():
        return f"{symbol}{int(number):,}"
    return f"{symbol}{number:,.2f}"


# ---------------------------------------------------------------------------
# General search provider
# ---------------------------------------------------------------------------

def normalize_web(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for item in _items(payload, "organic_results"):
        results.append(
            SearchResult(
                position=_int(item.get("position")),
                title=_str(item.get("title")),
                link=_str(item.get("link")),
                snippet=_str(item.get("snippet")),
                displayed_link=_str(item.get("displayed_link")),
                thumbnail=_str(item.get("thumbnail")),
                source=_str(item.get("source")),
                date=_str(item.get("date")),
            )
        )
    return results


def normalize_images(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for item in _items(payload, "images_results"):
        results.append(
            SearchResult(
                position=_int(item.get("position")),
                title=_str(item.get("title")),
                link=_str(item.get("link")),
                original=_str(item.get("original")),
                thumbnail=_str(item.get("thumbnail")) or _str(item.get("original")),
                source=_str(item.get("source")),
            )
        )
    return results


def normalize_videos(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for item in _items(payload, "video_results"):
        rich = item.get("rich_snippet") or {}
        extensions = (rich.get("top") or {}).get("extensions") if isinstance(rich, dict) else None
        results.append(
            SearchResult(
                position=_int(item.get("position")),
                title=_str(item.get("title")),
                link=_str(item.get("link")),
                snippet=_str(item.get("snippet")),
                displayed_link=_str(item.get("displayed_link")),
                thumbnail=_str(item.get("thumbnail")),
                duration=_str(item.get("duration")),
                platform=_str(item.get("platform"))
                or (_str(extensions[0]) if isinstance(extensions, list) and extensions else None),
                date=_str(item.get("date")),
            )
        )
    return results


def normalize_news(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for item in _items(payload, "news_results"):
        source = item.get("source")
        if isinstance(source, dict):
            source = source.get("name")
        link = _str(item.get("link"))
        results.append(
            SearchResult(
                position=_int(item.get("position")),
                title=_str(item.get("title")),
                link=link,
                snippet=_str(item.get("snippet")),
                displayed_link=_domain(link),
                thumbnail=_str(item.get("thumbnail")),
                source=_str(source),
                date=_str(item.get("date")),
            )
        )
    return results


def normalize_shopping(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for item in _items(payload, "shopping_results"):
        link = _str(item.get("link")) or _str(item.get("product_link"))
        results.append(
            SearchResult(
                position=_int(item.get("position")),
                title=_str(item.get("title")),
                link=link,
                snippet=_str(item.get("snippet")),
                displayed_link=_str(item.get("source")) or _domain(link),
                thumbnail=_str(item.get("thumbnail")),
                source=_str(item.get("source")),
                price=_str(item.get("price")),
                extracted_price=_float(item.get("extracted_price")),
                rating=_float(item.get("rating")),
                reviews=_int(item.get("reviews")),
            )
        )
    return results


# ---------------------------------------------------------------------------
# Local / maps provider
# ---------------------------------------------------------------------------

def _maps_link(item: Dict[str, Any]) -> Optional[str]:
    website = _str(item.get("website"))
    if website:
        return website
    place_id = _str(item.get("place_id"))
    if place_id:
        return f"https://www.google.com/maps/place/?q=place_id:{place_id}"
    title = _str(item.get("title"))
    if title:
        return f"https://www.google.com/maps/search/{quote_plus(title)}"
    return None


def _place_result(item: Dict[str, Any]) -> SearchResult:
    gps = item.get("gps_coordinates")
    coords = None
    if isinstance(gps, dict):
        lat, lng = _float(gps.get("latitude")), _float(gps.get("longitude"))
        if lat is not None and lng is not None:
            coords = GpsCoordinates(latitude=lat, longitude=lng)

    types = item.get("types")
    options = item.get("service_options")
    hours = item.get("hours")
    return SearchResult(
        position=_int(item.get("position")),
        title=_str(item.get("title")),
        link=_maps_link(item),
        thumbnail=_str(item.get("thumbnail")),
        rating=_float(item.get("rating")),
        reviews=_int(item.get("reviews")),
        price=_str(item.get("price")),
        type=_str(item.get("type")),
        types=[str(t) for t in types] if isinstance(types, list) else None,
        address=_str(item.get("address")),
        phone=_str(item.get("phone")),
        website=_str(item.get("website")),
        hours=_str(hours) if isinstance(hours, str) else None,
        open_state=_str(item.get("open_state")),
        gps_coordinates=coords,
        place_id=_str(item.get("place_id")),
        description=_str(item.get("description")),
        service_options={str(k): bool(v) for k, v in options.items()} if isinstance(options, dict) else None,
    )


def normalize_maps(payload: Dict[str, Any]) -> List[SearchResult]:
    local = _items(payload, "local_results")
    if local:
        return [_place_result(item) for item in local]
    # A query naming one specific place comes back as a single object
    place = payload.get("place_results")
    if isinstance(place, dict):
        return [_place_result(place)]
    return []


# ---------------------------------------------------------------------------
# Book catalog provider
# ---------------------------------------------------------------------------

def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def normalize_books(payload: Dict[str, Any]) -> List[SearchResult]:
    results: List[SearchResult] = []
    for position, doc in enumerate(_items(payload, "docs"), start=1):
        key = _str(doc.get("key"))
        cover_id = _int(doc.get("cover_i"))
        authors = doc.get("author_name")
        year = doc.get("first_publish_year")
        results.append(
            SearchResult(
                position=position,
                title=_str(doc.get("title")),
                link=f"{OPEN_LIBRARY_SITE}{key}" if key else None,
                displayed_link="openlibrary.org",
                snippet=_str(_first(doc.get("first_sentence"))) or _str(doc.get("subtitle")),
                thumbnail=f"{OPEN_LIBRARY_COVERS}/{cover_id}-M.jpg" if cover_id else None,
                authors=[str(a) for a in authors] if isinstance(authors, list) and authors else None,
                publication_date=str(year) if year is not None else None,
                publisher=_str(_first(doc.get("publisher"))),
                pages=_int(doc.get("number_of_pages_median")),
                isbn=_str(_first(doc.get("isbn"))),
            )
        )
    return results


# ---------------------------------------------------------------------------
# Stock quote provider
# ---------------------------------------------------------------------------

def _quote_result(summary: Dict[str, Any], query: str) -> SearchResult:
    movement = summary.get("price_movement")
    if not isinstance(movement, dict):
        market = summary.get("market")
        movement = market.get("price_movement") if isinstance(market, dict) else None

    stock = _str(summary.get("stock"))
    exchange = _str(summary.get("exchange"))
    link = f"{GOOGLE_FINANCE_QUOTE_URL}/{stock}:{exchange}" if stock and exchange else None
    price_movement = None
    snippet = None
    if isinstance(movement, dict):
        price_movement = PriceMovement(
            percentage=_float(movement.get("percentage")),
            value=_float(movement.get("value")),
            movement=_str(movement.get("movement")),
        )
        if price_movement.movement and price_movement.percentage is not None:
            snippet = f"{price_movement.movement} {price_movement.percentage:.2f}% today"

    return SearchResult(
        position=1,
        title=_str(summary.get("title")) or query,
        link=link,
        displayed_link="google.com/finance" if link else None,
        snippet=snippet,
        price=_str(summary.get("price")),
        extracted_price=_float(summary.get("extracted_price")),
        currency=_str(summary.get("currency")),
        stock=stock,
        exchange=exchange,
        date=_str(summary.get("date")),
        price_movement=price_movement,
    )


def _finance_news(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    news: List[Dict[str, Any]] = []
    for entry in _items(payload, "news_results"):
        # Entries are either articles or topic groups with nested "items"
        nested = entry.get("items")
        if isinstance(nested, list):
            news.extend(i for i in nested if isinstance(i, dict))
        else:
            news.append(entry)
    return news


def normalize_finance(payload: Dict[str, Any], query: str = "") -> List[SearchResult]:
    results: List[SearchResult] = []
    summary = payload.get("summary")
    if isinstance(summary, dict):
        results.append(_quote_result(summary, query))

    for item in _finance_news(payload):
        link = _str(item.get("link"))
        results.append(
            SearchResult(
                position=len(results) + 1,
                title=_str(item.get("snippet")) or _str(item.get("title")),
                link=link,
                displayed_link=_domain(link),
                thumbnail=_str(item.get("thumbnail")),
                source=_str(item.get("source")),
                date=_str(item.get("date")),
            )
        )
    return results


# ---------------------------------------------------------------------------
# Flights provider
# ---------------------------------------------------------------------------

def _airport(value: Any) -> Optional[FlightAirport]:
    if not isinstance(value, dict):
        return None
    return FlightAirport(name=_str(value.get("name")), id=_str(value.get("id")), time=_str(value.get("time")))


def _segment(item: Dict[str, Any]) -> FlightSegment:
    return FlightSegment(
        departure_airport=_airport(item.get("departure_airport")),
        arrival_airport=_airport(item.get("arrival_airport")),
        duration=_int(item.get("duration")),
        airline=_str(item.get("airline")),
        airline_logo=_str(item.get("airline_logo")),
        flight_number=_str(item.get("flight_number")),
        travel_class=_str(item.get("travel_class")),
        airplane=_str(item.get("airplane")),
    )


def _flight_title(segments: List[FlightSegment]) -> Optional[str]:
    if not segments:
        return None
    origin = segments[0].departure_airport
    destination = segments[-1].arrival_airport
    route = f"{origin.id if origin else '?'} → {destination.id if destination else '?'}"
    airlines: List[str] = []
    for seg in segments:
        if seg.airline and seg.airline not in airlines:
            airlines.append(seg.airline)
    return f"{route} · {', '.join(airlines)}" if airlines else route


def _flight_result(item: Dict[str, Any], link: Optional[str], currency: str) -> SearchResult:
    segments = [_segment(s) for s in _items(item, "flights")]
    layovers = [
        Layover(duration=_int(lay.get("duration")), name=_str(lay.get("name")), id=_str(lay.get("id")))
        for lay in _items(item, "layovers")
    ]
    emissions = item.get("carbon_emissions")
    carbon = None
    if isinstance(emissions, dict):
        carbon = CarbonEmissions(
            this_flight=_int(emissions.get("this_flight")),
            typical_for_this_route=_int(emissions.get("typical_for_this_route")),
            difference_percent=_int(emissions.get("difference_percent")),
        )
    booking = [
        BookingOption(
            link=_str(o.get("link")),
            name=_str(o.get("name")),
            price=format_price(o.get("price"), currency),
        )
        for o in _items(item, "booking_options")
    ]
    stops = len(layovers)
    return SearchResult(
        title=_flight_title(segments),
        link=link or "#",
        snippet=(f"{stops} stop{'s' if stops != 1 else ''}" if segments else None),
        thumbnail=_str(item.get("airline_logo")),
        price=format_price(item.get("price"), currency),
        extracted_price=_float(item.get("price")) if not isinstance(item.get("price"), str) else None,
        currency=currency,
        type=_str(item.get("type")),
        flights=segments or None,
        layovers=layovers or None,
        total_duration=_int(item.get("total_duration")),
        carbon_emissions=carbon,
        departure_token=_str(item.get("departure_token")),
        booking_token=_str(item.get("booking_token")),
        booking_options=booking or None,
    )


def normalize_flights(payload: Dict[str, Any], currency: str = "USD") -> List[SearchResult]:
    metadata = payload.get("search_metadata")
    link = _str(metadata.get("google_flights_url")) if isinstance(metadata, dict) else None
    itineraries = _items(payload, "best_flights") + _items(payload, "other_flights")
    results = [_flight_result(item, link, currency) for item in itineraries]
    for position, result in enumerate(results, start=1):
        result.position = position
    return results


GENERAL_NORMALIZERS: Dict[SearchType, Callable[[Dict[str, Any]], List[SearchResult]]] = {
    SearchType.WEB: normalize_web,
    SearchType.IMAGES: normalize_images,
    SearchType.VIDEOS: normalize_videos,
    SearchType.NEWS: normalize_news,
    SearchType.SHOPPING: normalize_shopping,
    SearchType.MAPS: normalize_maps,
}


# ---------------------------------------------------------------------------
# Shared metadata extraction
# ---------------------------------------------------------------------------

def extract_total_results(payload: Dict[str, Any], fallback_count: int) -> Any:
    """Provider-reported total, falling back to the number of results returned."""
    for key in ("search_information", "search_metadata"):
        section = payload.get(key)
        if isinstance(section, dict) and section.get("total_results"):
            return section["total_results"]
    return str(fallback_count)


def extract_time_taken(payload: Dict[str, Any]) -> float:
    metadata = payload.get("search_metadata")
    if not isinstance(metadata, dict):
        return 0.0
    for key in ("time_taken_displayed", "processed_time", "total_time_taken"):
        value = _float(metadata.get(key))
        if value:
            return value
    return 0.0
