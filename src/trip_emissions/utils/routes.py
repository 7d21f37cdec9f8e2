import unicodedata
from typing import List, Optional, Tuple

from ..models import CalculationStatus, Outcome, ReferenceData
from ..reference import REFERENCE_DATA


def normalize_city(name: str) -> str:
    """Trim and case-fold a city name for comparison."""
    return name.strip().casefold()


def collation_key(name: str) -> Tuple[str, str]:
    """
    Sort key approximating pt-BR collation: accents and case are ignored at
    the first level, the exact string breaks ties so the order is total.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), name)


def lookup_distance(origin, destination, reference: ReferenceData = REFERENCE_DATA) -> Outcome:
    """
    Find the distance between two cities in either direction.
    Returns Outcome(distance_km) or Outcome(None, ROUTE_NOT_FOUND).
    Assumes at most one route per unordered city pair; otherwise the first
    matching entry wins.
    """
    if not isinstance(origin, str) or not isinstance(destination, str):
        return Outcome(None, CalculationStatus.ROUTE_NOT_FOUND)

    o = normalize_city(origin)
    d = normalize_city(destination)
    if not o or not d:
        return Outcome(None, CalculationStatus.ROUTE_NOT_FOUND)

    for route in reference.routes:
        ro = normalize_city(route.origin)
        rd = normalize_city(route.destination)
        if (ro == o and rd == d) or (ro == d and rd == o):
            return Outcome(route.distance_km)

    return Outcome(None, CalculationStatus.ROUTE_NOT_FOUND)


def find_distance(origin, destination, reference: ReferenceData = REFERENCE_DATA) -> Optional[float]:
    """Distance in km between two known cities, or None if the pair is not listed."""
    return lookup_distance(origin, destination, reference).value


def list_cities(reference: ReferenceData = REFERENCE_DATA) -> List[str]:
    """All distinct origin and destination names, in pt-BR alphabetical order."""
    cities = set()
    for route in reference.routes:
        cities.add(route.origin)
        cities.add(route.destination)
    return sorted(cities, key=collation_key)


def suggest_cities(prefix: str, reference: ReferenceData = REFERENCE_DATA, limit: int = 8) -> List[str]:
    """Known cities whose name starts with prefix (accent- and case-insensitive)."""
    wanted = collation_key(prefix.strip())[0]
    matches = [c for c in list_cities(reference) if collation_key(c)[0].startswith(wanted)]
    return matches[:limit]
