"""
Static airport lookup used to turn free-text flight inputs into IATA codes.

The table is read-only and small, so lookups are plain linear scans.
"""
from __future__ import annotations

import re
from typing import List, Optional

from domain.models import Airport
from services.errors import InvalidSearchRequest

AIRPORTS: tuple[Airport, ...] = (
    # United States
    Airport("JFK", "John F. Kennedy International Airport", "New York", "US"),
    Airport("LGA", "LaGuardia Airport", "New York", "US"),
    Airport("EWR", "Newark Liberty International Airport", "New York", "US"),
    Airport("LAX", "Los Angeles International Airport", "Los Angeles", "US"),
    Airport("SFO", "San Francisco International Airport", "San Francisco", "US"),
    Airport("ORD", "O'Hare International Airport", "Chicago", "US"),
    Airport("MDW", "Midway International Airport", "Chicago", "US"),
    Airport("MIA", "Miami International Airport", "Miami", "US"),
    Airport("DFW", "Dallas/Fort Worth International Airport", "Dallas", "US"),
    Airport("DEN", "Denver International Airport", "Denver", "US"),
    Airport("ATL", "Hartsfield-Jackson Atlanta International Airport", "Atlanta", "US"),
    Airport("SEA", "Seattle-Tacoma International Airport", "Seattle", "US"),
    Airport("LAS", "Harry Reid International Airport", "Las Vegas", "US"),
    Airport("PHX", "Phoenix Sky Harbor International Airport", "Phoenix", "US"),
    Airport("BOS", "Logan International Airport", "Boston", "US"),
    Airport("MSP", "Minneapolis-Saint Paul International Airport", "Minneapolis", "US"),
    Airport("DTW", "Detroit Metropolitan Wayne County Airport", "Detroit", "US"),
    Airport("PHL", "Philadelphia International Airport", "Philadelphia", "US"),
    Airport("CLT", "Charlotte Douglas International Airport", "Charlotte", "US"),
    Airport("IAH", "George Bush Intercontinental Airport", "Houston", "US"),
    Airport("HOU", "William P. Hobby Airport", "Houston", "US"),
    # Europe
    Airport("LHR", "London Heathrow Airport", "London", "UK"),
    Airport("LGW", "London Gatwick Airport", "London", "UK"),
    Airport("CDG", "Charles de Gaulle Airport", "Paris", "FR"),
    Airport("ORY", "Orly Airport", "Paris", "FR"),
    Airport("FRA", "Frankfurt Airport", "Frankfurt", "DE"),
    Airport("AMS", "Amsterdam Airport Schiphol", "Amsterdam", "NL"),
    Airport("MAD", "Madrid-Barajas Airport", "Madrid", "ES"),
    Airport("BCN", "Barcelona-El Prat Airport", "Barcelona", "ES"),
    Airport("FCO", "Leonardo da Vinci International Airport", "Rome", "IT"),
    Airport("MXP", "Malpensa Airport", "Milan", "IT"),
    Airport("ZRH", "Zurich Airport", "Zurich", "CH"),
    Airport("VIE", "Vienna International Airport", "Vienna", "AT"),
    Airport("CPH", "Copenhagen Airport", "Copenhagen", "DK"),
    Airport("ARN", "Stockholm Arlanda Airport", "Stockholm", "SE"),
    Airport("OSL", "Oslo Airport", "Oslo", "NO"),
    # Asia
    Airport("NRT", "Narita International Airport", "Tokyo", "JP"),
    Airport("HND", "Haneda Airport", "Tokyo", "JP"),
    Airport("ICN", "Incheon International Airport", "Seoul", "KR"),
    Airport("PEK", "Beijing Capital International Airport", "Beijing", "CN"),
    Airport("PVG", "Shanghai Pudong International Airport", "Shanghai", "CN"),
    Airport("HKG", "Hong Kong International Airport", "Hong Kong", "HK"),
    Airport("SIN", "Singapore Changi Airport", "Singapore", "SG"),
    Airport("BKK", "Suvarnabhumi Airport", "Bangkok", "TH"),
    Airport("KUL", "Kuala Lumpur International Airport", "Kuala Lumpur", "MY"),
    # Canada
    Airport("YYZ", "Toronto Pearson International Airport", "Toronto", "CA"),
    Airport("YVR", "Vancouver International Airport", "Vancouver", "CA"),
    Airport("YUL", "Montreal-Pierre Elliott Trudeau International Airport", "Montreal", "CA"),
    # Australia
    Airport("SYD", "Sydney Kingsford Smith Airport", "Sydney", "AU"),
    Airport("MEL", "Melbourne Airport", "Melbourne", "AU"),
)

_IATA_CODE_RE = re.compile(r"^[A-Za-z]{3}$")


def _exact_match(term: str) -> Optional[Airport]:
    for airport in AIRPORTS:
        if airport.code.lower() == term:
            return airport
    for airport in AIRPORTS:
        if airport.city.lower() == term:
            return airport
    return None


def find_airport_by_input(text: Optional[str]) -> Optional[Airport]:
    """
    Resolve free text to a single airport.

    Precedence: exact code, exact city, partial city (either string contains
    the other), then a substring of the airport name.
    """
    if not text or not text.strip():
        return None
    term = text.strip().lower()

    airport = _exact_match(term)
    if airport:
        return airport
    for airport in AIRPORTS:
        city = airport.city.lower()
        if term in city or city in term:
            return airport
    for airport in AIRPORTS:
        if term in airport.name.lower():
            return airport
    return None


def get_airport_suggestions(text: Optional[str], limit: int = 5) -> List[Airport]:
    """Autocomplete candidates: code prefix, then city prefix, then substring."""
    if not text or len(text.strip()) < 2:
        return []
    term = text.strip().lower()

    suggestions: List[Airport] = []
    seen: set[str] = set()

    def _add(matches) -> None:
        for airport in matches:
            if airport.code not in seen:
                seen.add(airport.code)
                suggestions.append(airport)

    _add(a for a in AIRPORTS if a.code.lower().startswith(term))
    _add(a for a in AIRPORTS if a.city.lower().startswith(term))
    _add(a for a in AIRPORTS if term in a.city.lower() or term in a.name.lower())
    return suggestions[:limit]


def validate_airport_code(code: Optional[str]) -> bool:
    if not code:
        return False
    code = code.strip().lower()
    return any(a.code.lower() == code for a in AIRPORTS)


def resolve_airport_code(text: Optional[str], field_label: str) -> str:
    """
    Turn user input into a 3-letter airport code.

    Exact codes and city names in the table win. Any other well-formed code
    is passed through uppercased before partial city or name matching, so
    "SAN" stays SAN rather than matching San Francisco.
    """
    if not text or not text.strip():
        article = "an" if field_label[:1].lower() in "aeiou" else "a"
        raise InvalidSearchRequest(f"Please enter {article} {field_label} airport or city.")
    cleaned = text.strip()
    airport = _exact_match(cleaned.lower())
    if airport:
        return airport.code
    if _IATA_CODE_RE.match(cleaned):
        return cleaned.upper()
    airport = find_airport_by_input(cleaned)
    if airport:
        return airport.code
    raise InvalidSearchRequest(
        f'Unknown {field_label} airport "{cleaned}". '
        "Try using a 3-letter airport code (e.g., JFK) or city name."
    )
