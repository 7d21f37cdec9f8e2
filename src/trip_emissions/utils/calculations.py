"""
Emission and carbon-credit calculations.

Every function here is pure and total: invalid input (unknown mode,
non-positive distance, missing constant) maps to a documented fallback
(0 or None) instead of raising. Callers that need to tell a real zero from
a fallback use the *_outcome variants, which carry a CalculationStatus.
"""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import List, Optional

from ..constants import EMISSION_DECIMALS, CREDIT_DECIMALS
from ..models import (
    CalculationStatus, CreditEstimate, CreditPrice, ModeEmission, Outcome,
    ReferenceData, SavingsResult
)
from ..reference import REFERENCE_DATA


def round_half_up(value: float, places: int) -> float:
    """
    Round half away from zero on the decimal representation of value,
    so that 0.125 -> 0.13 and -0.125 -> -0.13. Non-finite values
    (a product that overflowed to inf) are returned as they are.
    """
    number = float(value)
    if not math.isfinite(number):
        return number
    quantum = Decimal(1).scaleb(-places)
    # wide enough for every digit of the largest finite float
    with localcontext() as ctx:
        ctx.prec = 400
        rounded = Decimal(repr(number)).quantize(quantum, rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0
    return float(rounded) + 0.0


def _to_number(value) -> Optional[float]:
    """Coerce to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def emission_outcome(distance_km, mode, reference: ReferenceData = REFERENCE_DATA) -> Outcome:
    factors = reference.emission_factors
    if not isinstance(mode, str) or mode not in factors:
        return Outcome(0.0, CalculationStatus.UNKNOWN_MODE)

    distance = _to_number(distance_km)
    if distance is None or distance <= 0:
        return Outcome(0.0, CalculationStatus.INVALID_DISTANCE)

    return Outcome(round_half_up(distance * factors[mode], EMISSION_DECIMALS))


def emission(distance_km, mode, reference: ReferenceData = REFERENCE_DATA) -> float:
    """
    Emission in kg CO2e for a trip: distance_km * factor(mode), 2 decimals.
    Returns 0 for an unknown mode or a non-positive distance.
    """
    return emission_outcome(distance_km, mode, reference).value


def emission_for_all_modes(distance_km, reference: ReferenceData = REFERENCE_DATA) -> List[ModeEmission]:
    """
    Emission of every known mode for the same distance, lowest first.

    percentage_vs_car is emission / baseline * 100 (2 decimals), or None when
    the baseline mode is not defined or its emission is 0. Ties keep the
    declaration order of the modes.
    """
    baseline = None
    if reference.baseline_mode in reference.emission_factors:
        baseline = emission(distance_km, reference.baseline_mode, reference)

    results = []
    for mode in reference.emission_factors:
        value = emission(distance_km, mode, reference)
        percentage = None
        if baseline:
            percentage = round_half_up(value / baseline * 100, EMISSION_DECIMALS)
        results.append(ModeEmission(mode=mode, emission=value, percentage_vs_car=percentage))

    # sorted() is stable
    return sorted(results, key=lambda r: r.emission)


def savings(emission_kg, baseline_kg) -> SavingsResult:
    """
    Savings of an emission against a baseline emission.
    percentage is None when the baseline is zero or negative.
    """
    candidate = _to_number(emission_kg) or 0.0
    baseline = _to_number(baseline_kg) or 0.0

    saved = baseline - candidate
    percentage = None
    if baseline > 0:
        percentage = round_half_up(saved / baseline * 100, EMISSION_DECIMALS)

    return SavingsResult(
        saved_kg=round_half_up(saved, EMISSION_DECIMALS),
        percentage=percentage,
    )


def carbon_credits_outcome(emission_kg, reference: ReferenceData = REFERENCE_DATA) -> Outcome:
    credit = reference.carbon_credit
    if credit is None or not credit.kg_per_credit:
        return Outcome(0.0, CalculationStatus.MISSING_CONSTANT)

    kg = _to_number(emission_kg)
    if kg is None:
        return Outcome(0.0, CalculationStatus.INVALID_AMOUNT)

    return Outcome(round_half_up(kg / credit.kg_per_credit, CREDIT_DECIMALS))


def carbon_credits(emission_kg, reference: ReferenceData = REFERENCE_DATA) -> float:
    """Credits needed to offset emission_kg (4 decimals); 0 if the constant is missing."""
    return carbon_credits_outcome(emission_kg, reference).value


def estimate_credit_price(credits, reference: ReferenceData = REFERENCE_DATA) -> CreditPrice:
    """
    Price range in BRL for a number of credits. A missing price bound counts
    as 0; without credit constants at all every field is 0.
    """
    credit = reference.carbon_credit
    amount = _to_number(credits)
    if credit is None or amount is None:
        return CreditPrice(min=0.0, max=0.0, average=0.0)

    low = amount * (credit.price_min_brl or 0)
    high = amount * (credit.price_max_brl or 0)
    average = (low + high) / 2

    return CreditPrice(
        min=round_half_up(low, EMISSION_DECIMALS),
        max=round_half_up(high, EMISSION_DECIMALS),
        average=round_half_up(average, EMISSION_DECIMALS),
    )


def estimate_credits(emission_kg, reference: ReferenceData = REFERENCE_DATA) -> CreditEstimate:
    credits = carbon_credits(emission_kg, reference)
    price = estimate_credit_price(credits, reference)
    return CreditEstimate(
        credits=credits,
        price_min=price.min,
        price_max=price.max,
        price_average=price.average,
    )
