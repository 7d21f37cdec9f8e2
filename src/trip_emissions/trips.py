import logging
import math
from typing import Optional, Tuple

from .models import ReferenceData, TripRequest, TripResult
from .reference import REFERENCE_DATA
from .utils.calculations import (
    emission, emission_for_all_modes, savings, estimate_credits
)
from .utils.routes import find_distance
from .audit import audit_logger

logger = logging.getLogger(__name__)


class TripInputError(ValueError):
    """User input that cannot be turned into a trip calculation."""


def _positive_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def resolve_mode(value, reference: ReferenceData = REFERENCE_DATA) -> Optional[str]:
    """
    Map a mode id or its display label ("bus", "Ônibus", " CAR ") to the mode id.
    Returns None when nothing matches.
    """
    if not isinstance(value, str):
        return None
    wanted = value.strip().casefold()
    for mode, meta in reference.transport_modes.items():
        if wanted in (mode.casefold(), meta.label.casefold()):
            return mode
    return None


def resolve_distance(
    request: TripRequest, reference: ReferenceData = REFERENCE_DATA
) -> Tuple[Optional[float], Optional[str]]:
    """
    Decide which distance a trip uses.
    - manual_distance set: the typed distance, never the route table
    - otherwise the route table, falling back to a typed distance if the
      pair is not listed
    Returns (distance_km, source) with source "route_table", "manual" or None.
    """
    typed = _positive_number(request.distance_km)

    if request.manual_distance:
        return (typed, "manual") if typed is not None else (None, None)

    known = find_distance(request.origin, request.destination, reference)
    if known is not None:
        if typed is not None and typed != known:
            logger.debug(
                f"Route table distance {known} km replaces typed {typed} km "
                f"for {request.origin} -> {request.destination}"
            )
        return known, "route_table"

    if typed is not None:
        return typed, "manual"
    return None, None


def validate_trip_request(
    request: TripRequest, reference: ReferenceData = REFERENCE_DATA
) -> Tuple[float, str]:
    """
    Validate user input before it reaches the calculator.
    Returns (distance_km, source); raises TripInputError with a user-facing message.
    """
    origin = (request.origin or "").strip() if isinstance(request.origin, str) else ""
    destination = (request.destination or "").strip() if isinstance(request.destination, str) else ""
    if not origin or not destination:
        raise TripInputError("Please fill in origin and destination.")

    if not request.mode:
        raise TripInputError("Please select a transport mode.")
    if request.mode not in reference.emission_factors:
        raise TripInputError(f"Unknown transport mode '{request.mode}'.")

    distance, source = resolve_distance(request, reference)
    if distance is None:
        if request.distance_km is None and not request.manual_distance:
            raise TripInputError(
                f"Distance not found for {origin} -> {destination}. Enter the distance manually."
            )
        raise TripInputError("Invalid distance. Make sure the distance is greater than 0.")

    return distance, source


def calculate_trip(request: TripRequest, reference: ReferenceData = REFERENCE_DATA) -> TripResult:
    """
    Full calculation for one trip: emission of the selected mode, savings
    against the baseline mode, all-mode comparison and carbon credits.
    """
    distance, source = validate_trip_request(request, reference)
    mode = request.mode
    route_label = f"{request.origin.strip()} -> {request.destination.strip()}"
    logger.debug(f"Calculating {route_label} ({distance} km, {mode}, source={source})")

    emission_kg = emission(distance, mode, reference)
    audit_logger.log_calculation(
        context=f"Emission: {route_label} [{mode}]",
        formula="Distance(km) * EF(kgCO2e/km)",
        variables={"Distance_km": distance, "EF": reference.emission_factors[mode], "Source": source},
        result=emission_kg,
        unit="kgCO2e",
    )

    baseline_kg = emission(distance, reference.baseline_mode, reference)
    trip_savings = savings(emission_kg, baseline_kg)
    audit_logger.log_calculation(
        context=f"Savings vs {reference.baseline_mode}: {route_label}",
        formula="(Baseline - Emission) / Baseline * 100",
        variables={"Emission_kg": emission_kg, "Baseline_kg": baseline_kg},
        result=trip_savings.percentage,
        unit="%",
    )

    comparison = emission_for_all_modes(distance, reference)

    credits = estimate_credits(emission_kg, reference)
    credit_cfg = reference.carbon_credit
    audit_logger.log_calculation(
        context=f"Carbon credits: {route_label}",
        formula="Emission(kg) / KgPerCredit; Price = Credits * [PriceMin, PriceMax]",
        variables={
            "Emission_kg": emission_kg,
            "KgPerCredit": credit_cfg.kg_per_credit if credit_cfg else None,
            "PriceMin_BRL": credit_cfg.price_min_brl if credit_cfg else None,
            "PriceMax_BRL": credit_cfg.price_max_brl if credit_cfg else None,
        },
        result=credits.credits,
        unit="credits",
    )

    return TripResult(
        origin=request.origin.strip(),
        destination=request.destination.strip(),
        distance_km=distance,
        distance_source=source,
        mode=mode,
        emission_kg=emission_kg,
        baseline_kg=baseline_kg,
        savings=trip_savings,
        credits=credits,
        comparison=comparison,
    )
