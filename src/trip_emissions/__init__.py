from .models import (
    TransportModeInfo,
    Route,
    CarbonCreditConfig,
    ReferenceData,
    CalculationStatus,
    Outcome,
    ModeEmission,
    SavingsResult,
    CreditPrice,
    CreditEstimate,
    TripRequest,
    TripResult
)
from .reference import REFERENCE_DATA, ReferenceDataError, build_reference_data
from .utils.calculations import (
    emission,
    emission_for_all_modes,
    savings,
    carbon_credits,
    estimate_credit_price,
    estimate_credits
)
from .utils.routes import find_distance, list_cities
from .trips import TripInputError, calculate_trip

__all__ = [
    "TransportModeInfo",
    "Route",
    "CarbonCreditConfig",
    "ReferenceData",
    "CalculationStatus",
    "Outcome",
    "ModeEmission",
    "SavingsResult",
    "CreditPrice",
    "CreditEstimate",
    "TripRequest",
    "TripResult",
    "REFERENCE_DATA",
    "ReferenceDataError",
    "build_reference_data",
    "emission",
    "emission_for_all_modes",
    "savings",
    "carbon_credits",
    "estimate_credit_price",
    "estimate_credits",
    "find_distance",
    "list_cities",
    "TripInputError",
    "calculate_trip"
]
