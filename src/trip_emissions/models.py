from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TransportModeInfo:
    """Display metadata for a transport mode."""
    label: str
    icon: str
    color: str


@dataclass(frozen=True)
class Route:
    """
    A known origin-destination pair. The distance is undirected: the route
    matches a query regardless of which name is given as origin.
    """
    origin: str
    destination: str
    distance_km: float


@dataclass(frozen=True)
class CarbonCreditConfig:
    """
    Credit conversion constants. Any field may be None when the constant
    is unavailable; the calculator then falls back to zero.
    """
    kg_per_credit: Optional[float]
    price_min_brl: Optional[float]
    price_max_brl: Optional[float]


@dataclass(frozen=True)
class ReferenceData:
    """
    Static reference data consumed by the calculator and route lookup.
    Built once by reference.load_reference_data() and never mutated.
    """
    emission_factors: Mapping[str, float]
    transport_modes: Mapping[str, TransportModeInfo]
    carbon_credit: Optional[CarbonCreditConfig]
    routes: Tuple[Route, ...]
    baseline_mode: str = "car"


class CalculationStatus(Enum):
    OK = "ok"
    UNKNOWN_MODE = "unknown_mode"
    INVALID_DISTANCE = "invalid_distance"
    INVALID_AMOUNT = "invalid_amount"
    ROUTE_NOT_FOUND = "route_not_found"
    MISSING_CONSTANT = "missing_constant"


@dataclass(frozen=True)
class Outcome:
    """
    A calculation value tagged with how it was obtained. When status is not
    OK, value holds the lenient fallback (0 or None).
    """
    value: Any
    status: CalculationStatus = CalculationStatus.OK

    @property
    def ok(self) -> bool:
        return self.status is CalculationStatus.OK


@dataclass(frozen=True)
class ModeEmission:
    mode: str
    emission: float
    percentage_vs_car: Optional[float]


@dataclass(frozen=True)
class SavingsResult:
    saved_kg: float
    percentage: Optional[float]


@dataclass(frozen=True)
class CreditPrice:
    min: float
    max: float
    average: float


@dataclass(frozen=True)
class CreditEstimate:
    credits: float
    price_min: float
    price_max: float
    price_average: float


@dataclass(frozen=True)
class TripRequest:
    """
    User input for one trip. distance_km is optional when the route table
    can supply it; manual_distance forces the given distance to be used.
    """
    origin: str
    destination: str
    mode: Optional[str]
    distance_km: Optional[float] = None
    manual_distance: bool = False


@dataclass(frozen=True)
class TripResult:
    """
    Everything the presentation layer shows for one trip.
    """
    origin: str
    destination: str
    distance_km: float
    distance_source: Optional[str]
    mode: str
    emission_kg: float
    baseline_kg: float
    savings: SavingsResult
    credits: CreditEstimate
    comparison: List[ModeEmission] = field(default_factory=list)

    @property
    def greenest_mode(self) -> Optional[ModeEmission]:
        return self.comparison[0] if self.comparison else None
