import logging
import math
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .constants import (
    EMISSION_FACTORS, TRANSPORT_MODES, BASELINE_MODE,
    KG_PER_CREDIT, PRICE_MIN_BRL, PRICE_MAX_BRL, ROUTES
)
from .models import CarbonCreditConfig, ReferenceData, Route, TransportModeInfo

logger = logging.getLogger(__name__)


class ReferenceDataError(ValueError):
    """Raised at start-up when the static reference data is malformed."""


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _normalize(name: str) -> str:
    return name.strip().casefold()


def validate_reference_data(reference: ReferenceData) -> None:
    """
    Check the reference data once, at load time. Any problem here is a
    programming/configuration error and is fatal.

    Duplicate entries for the same unordered city pair are not rejected:
    lookups return the first one, and a warning is logged.
    """
    if not reference.emission_factors:
        raise ReferenceDataError("No emission factors defined")

    for mode, factor in reference.emission_factors.items():
        if not _is_number(factor) or factor < 0:
            raise ReferenceDataError(f"Invalid emission factor for '{mode}': {factor!r}")
        if mode not in reference.transport_modes:
            raise ReferenceDataError(f"Missing display metadata for transport mode '{mode}'")

    credit = reference.carbon_credit
    if credit is not None:
        for name in ("kg_per_credit", "price_min_brl", "price_max_brl"):
            value = getattr(credit, name)
            if value is not None and (not _is_number(value) or value < 0):
                raise ReferenceDataError(f"Invalid carbon credit constant {name}={value!r}")
        if (credit.price_min_brl is not None and credit.price_max_brl is not None
                and credit.price_min_brl > credit.price_max_brl):
            raise ReferenceDataError("Carbon credit price_min_brl is greater than price_max_brl")

    seen = {}
    for route in reference.routes:
        if not isinstance(route.origin, str) or not route.origin.strip():
            raise ReferenceDataError(f"Route with blank origin: {route}")
        if not isinstance(route.destination, str) or not route.destination.strip():
            raise ReferenceDataError(f"Route with blank destination: {route}")
        if not _is_number(route.distance_km) or route.distance_km <= 0:
            raise ReferenceDataError(f"Route with non-positive distance: {route}")

        pair = frozenset((_normalize(route.origin), _normalize(route.destination)))
        if pair in seen:
            logger.warning(
                f"Duplicate route {route.origin} <-> {route.destination}; "
                f"lookups will use the first entry ({seen[pair]} km)."
            )
        else:
            seen[pair] = route.distance_km


def build_reference_data(
    emission_factors: Mapping[str, float],
    transport_modes: Mapping[str, Mapping[str, str]],
    routes: Iterable[Tuple[str, str, float]],
    kg_per_credit: Optional[float] = KG_PER_CREDIT,
    price_min_brl: Optional[float] = PRICE_MIN_BRL,
    price_max_brl: Optional[float] = PRICE_MAX_BRL,
    baseline_mode: str = BASELINE_MODE,
    include_credit: bool = True,
) -> ReferenceData:
    """
    Assemble and validate a ReferenceData instance from plain tables.
    Also used by tests to build alternative reference sets.
    """
    try:
        modes: Dict[str, TransportModeInfo] = {
            key: TransportModeInfo(label=meta["label"], icon=meta["icon"], color=meta["color"])
            for key, meta in transport_modes.items()
        }
        route_entries = tuple(Route(origin=o, destination=d, distance_km=km) for o, d, km in routes)
    except (KeyError, TypeError, ValueError) as e:
        raise ReferenceDataError(f"Malformed reference tables: {e}") from e

    credit = (
        CarbonCreditConfig(
            kg_per_credit=kg_per_credit,
            price_min_brl=price_min_brl,
            price_max_brl=price_max_brl,
        )
        if include_credit
        else None
    )

    reference = ReferenceData(
        emission_factors=MappingProxyType(dict(emission_factors)),
        transport_modes=MappingProxyType(modes),
        carbon_credit=credit,
        routes=route_entries,
        baseline_mode=baseline_mode,
    )
    validate_reference_data(reference)
    return reference


def load_reference_data() -> ReferenceData:
    """Build the default reference data from the constants module."""
    reference = build_reference_data(EMISSION_FACTORS, TRANSPORT_MODES, ROUTES)
    logger.debug(
        f"Reference data loaded: {len(reference.emission_factors)} modes, "
        f"{len(reference.routes)} routes"
    )
    return reference


REFERENCE_DATA = load_reference_data()
