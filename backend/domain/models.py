"""
Core domain models for the search aggregator.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class SearchType(str, Enum):
    """Result category selected in the UI; decides provider and mapping."""
    WEB = "web"
    IMAGES = "images"
    VIDEOS = "videos"
    NEWS = "news"
    SHOPPING = "shopping"
    MAPS = "maps"
    BOOKS = "books"
    FLIGHTS = "flights"
    FINANCE = "finance"


class FlightType(str, Enum):
    """Trip type, using the flights provider's numeric codes."""
    ROUND_TRIP = "1"
    ONE_WAY = "2"


class TravelClass(str, Enum):
    ECONOMY = "1"
    PREMIUM_ECONOMY = "2"
    BUSINESS = "3"
    FIRST = "4"


def _compact(value: Any) -> Any:
    """Recursively drop None values (and empty containers they leave behind)."""
    if is_dataclass(value):
        out: Dict[str, Any] = {}
        for f in fields(value):
            item = _compact(getattr(value, f.name))
            if item is None or item == [] or item == {}:
                continue
            out[f.name] = item
        return out
    if isinstance(value, list):
        return [_compact(v) for v in value]
    if isinstance(value, dict):
        return {k: _compact(v) for k, v in value.items() if v is not None}
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass
class GpsCoordinates:
    latitude: float
    longitude: float


@dataclass
class FlightAirport:
    """An airport endpoint of a flight segment."""
    name: Optional[str] = None
    id: Optional[str] = None
    time: Optional[str] = None  # "YYYY-MM-DD HH:MM" as reported by the provider


@dataclass
class FlightSegment:
    departure_airport: Optional[FlightAirport] = None
    arrival_airport: Optional[FlightAirport] = None
    duration: Optional[int] = None  # minutes
    airline: Optional[str] = None
    airline_logo: Optional[str] = None
    flight_number: Optional[str] = None
    travel_class: Optional[str] = None
    airplane: Optional[str] = None


@dataclass
class Layover:
    duration: Optional[int] = None  # minutes
    name: Optional[str] = None
    id: Optional[str] = None


@dataclass
class CarbonEmissions:
    this_flight: Optional[int] = None  # grams
    typical_for_this_route: Optional[int] = None
    difference_percent: Optional[int] = None


@dataclass
class BookingOption:
    link: Optional[str] = None
    name: Optional[str] = None
    price: Optional[str] = None


@dataclass
class PriceMovement:
    percentage: Optional[float] = None
    value: Optional[float] = None
    movement: Optional[str] = None  # "Up" / "Down"


@dataclass
class SearchResult:
    """
    A single normalized search result.

    Every field is optional: no provider populates all of them, and the UI
    renders whichever subset is present for the active category.
    """
    position: Optional[int] = None
    title: Optional[str] = None
    link: Optional[str] = None
    snippet: Optional[str] = None
    displayed_link: Optional[str] = None
    thumbnail: Optional[str] = None
    source: Optional[str] = None
    date: Optional[str] = None
    # Images / videos
    original: Optional[str] = None
    duration: Optional[str] = None
    platform: Optional[str] = None
    # Shopping / places / quotes
    price: Optional[str] = None
    extracted_price: Optional[float] = None
    currency: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    # Places
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    type: Optional[str] = None
    types: Optional[List[str]] = None
    hours: Optional[str] = None
    open_state: Optional[str] = None
    gps_coordinates: Optional[GpsCoordinates] = None
    place_id: Optional[str] = None
    description: Optional[str] = None
    service_options: Optional[Dict[str, bool]] = None
    # Books
    authors: Optional[List[str]] = None
    publication_date: Optional[str] = None
    publisher: Optional[str] = None
    pages: Optional[int] = None
    isbn: Optional[str] = None
    # Finance
    stock: Optional[str] = None
    exchange: Optional[str] = None
    price_movement: Optional[PriceMovement] = None
    # Flights
    flights: Optional[List[FlightSegment]] = None
    layovers: Optional[List[Layover]] = None
    total_duration: Optional[int] = None  # minutes
    carbon_emissions: Optional[CarbonEmissions] = None
    departure_token: Optional[str] = None
    booking_token: Optional[str] = None
    booking_options: Optional[List[BookingOption]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(self)


@dataclass
class SearchMetadata:
    total_results: str
    time_taken_displayed: float
    search_type: SearchType
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    results_per_page: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_results": self.total_results,
            "time_taken_displayed": self.time_taken_displayed,
            "search_type": self.search_type.value,
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
            "results_per_page": self.results_per_page,
        }


@dataclass
class SearchPage:
    """One page of normalized results, as returned to the UI."""
    results: List[SearchResult]
    metadata: SearchMetadata
    search_type: SearchType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "search_metadata": self.metadata.to_dict(),
            "search_type": self.search_type.value,
        }


@dataclass
class MapsQuery:
    lat: float
    lng: float
    zoom: str = "14z"

    @property
    def ll(self) -> str:
        """Viewport string in the maps provider's '@lat,lng,zoom' form."""
        return f"@{self.lat},{self.lng},{self.zoom}"


@dataclass
class FlightQuery:
    departure_id: str
    arrival_id: str
    outbound_date: date
    return_date: Optional[date] = None
    flight_type: FlightType = FlightType.ROUND_TRIP
    travel_class: TravelClass = TravelClass.ECONOMY
    adults: int = 1


@dataclass
class SearchRequest:
    """A validated inbound search request."""
    query: str
    search_type: SearchType = SearchType.WEB
    page: int = 1
    maps: Optional[MapsQuery] = None
    flights: Optional[FlightQuery] = None


@dataclass(frozen=True)
class Airport:
    code: str
    name: str
    city: str
    country: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "code": self.code,
            "name": self.name,
            "city": self.city,
            "country": self.country,
        }
