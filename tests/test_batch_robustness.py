import sys
import os
import math

# Add src to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src"))

from trip_emissions.models import CalculationStatus
from trip_emissions.reference import build_reference_data, ReferenceDataError
from trip_emissions.utils.calculations import (
    emission, emission_outcome, emission_for_all_modes,
    carbon_credits, carbon_credits_outcome, estimate_credit_price, estimate_credits, savings
)

MODES = {
    "bicycle": {"label": "Bicicleta", "icon": "🚲", "color": "#10b981"},
    "car": {"label": "Carro", "icon": "🚗", "color": "#059669"},
    "bus": {"label": "Ônibus", "icon": "🚌", "color": "#3b82f6"},
}
FACTORS = {"bicycle": 0.0, "car": 0.12, "bus": 0.089}


def test_emission_fallbacks_never_raise():
    print("Running test_emission_fallbacks_never_raise...")
    for distance in (0, -5, None, "abc", float("nan"), float("inf"), [], True):
        assert emission(distance, "car") == 0, distance

    assert emission(100, "plane") == 0
    assert emission(100, None) == 0
    assert emission(100, "CAR") == 0  # mode ids are exact
    assert emission("100", "car") == 12.0
    print("PASS")


def test_large_finite_inputs_never_raise():
    print("Running test_large_finite_inputs_never_raise...")
    # results too wide for the default 28-digit decimal context
    assert emission(1e27, "car") == 1e27 * 0.12
    assert emission(1e300, "car") == 1e300 * 0.12
    assert emission(sys.float_info.max, "truck") == sys.float_info.max * 0.96

    comparison = emission_for_all_modes(1e27)
    assert len(comparison) == 4
    assert comparison[0].mode == "bicycle"
    by_mode = {m.mode: m for m in comparison}
    assert by_mode["car"].emission == 1e27 * 0.12
    assert by_mode["car"].percentage_vs_car == 100.0
    assert by_mode["bicycle"].percentage_vs_car == 0.0

    s = savings(1e27, 0)
    assert s.saved_kg == -1e27 and s.percentage is None
    s = savings(0, 1e300)
    assert s.saved_kg == 1e300 and s.percentage == 100.0

    assert carbon_credits(1e27) == 1e27 / 1000
    assert carbon_credits(1e300) == 1e300 / 1000

    p = estimate_credit_price(1e25)
    assert p.min == 1e25 * 50
    assert p.max == 1e25 * 150
    assert p.average == (1e25 * 50 + 1e25 * 150) / 2

    # the product overflows; the price is reported as inf instead of raising
    p = estimate_credit_price(1e307)
    assert math.isinf(p.max)

    estimate = estimate_credits(1e300)
    assert estimate.credits == 1e300 / 1000
    assert math.isfinite(estimate.price_min)
    print("PASS")


def test_emission_outcome_statuses():
    print("Running test_emission_outcome_statuses...")
    ok = emission_outcome(430, "bus")
    assert ok.ok and ok.value == 38.27

    unknown = emission_outcome(430, "plane")
    assert unknown.status is CalculationStatus.UNKNOWN_MODE
    assert unknown.value == 0

    invalid = emission_outcome(-1, "car")
    assert invalid.status is CalculationStatus.INVALID_DISTANCE
    assert invalid.value == 0

    # bicycle is a real zero, not a fallback
    zero = emission_outcome(430, "bicycle")
    assert zero.ok and zero.value == 0
    print("PASS")


def test_all_modes_without_baseline():
    print("Running test_all_modes_without_baseline...")
    reference = build_reference_data(
        {"bicycle": 0.0, "bus": 0.089},
        {k: v for k, v in MODES.items() if k != "car"},
        [],
    )
    results = emission_for_all_modes(100, reference=reference)
    assert len(results) == 2
    assert all(r.percentage_vs_car is None for r in results)
    print("PASS")


def test_all_modes_with_zero_baseline():
    print("Running test_all_modes_with_zero_baseline...")
    results = emission_for_all_modes(0)
    assert len(results) == 4
    assert all(r.emission == 0 for r in results)
    assert all(r.percentage_vs_car is None for r in results)
    # all tied at zero: declaration order
    assert [r.mode for r in results] == ["bicycle", "car", "bus", "truck"]
    print("PASS")


def test_credit_constants_missing():
    print("Running test_credit_constants_missing...")
    no_credit = build_reference_data(FACTORS, MODES, [], include_credit=False)
    assert carbon_credits(1000, reference=no_credit) == 0
    assert carbon_credits_outcome(1000, reference=no_credit).status is CalculationStatus.MISSING_CONSTANT
    price = estimate_credit_price(1.0, reference=no_credit)
    assert (price.min, price.max, price.average) == (0.0, 0.0, 0.0)

    zero_rate = build_reference_data(FACTORS, MODES, [], kg_per_credit=0)
    assert carbon_credits(1000, reference=zero_rate) == 0

    no_min = build_reference_data(FACTORS, MODES, [], price_min_brl=None)
    price = estimate_credit_price(2.0, reference=no_min)
    assert (price.min, price.max, price.average) == (0.0, 300.0, 150.0)
    print("PASS")


def test_non_numeric_credit_inputs():
    print("Running test_non_numeric_credit_inputs...")
    assert carbon_credits("lots") == 0
    price = estimate_credit_price(None)
    assert (price.min, price.max, price.average) == (0.0, 0.0, 0.0)
    assert savings("x", None).percentage is None
    print("PASS")


def test_malformed_reference_data_is_fatal():
    print("Running test_malformed_reference_data_is_fatal...")
    bad_inputs = [
        ({"car": -0.1}, MODES, []),
        ({"car": "fast"}, MODES, []),
        ({"car": 0.12, "plane": 0.25}, MODES, []),
        (FACTORS, MODES, [("A", "B", 0)]),
        (FACTORS, MODES, [("  ", "B", 10)]),
        ({}, MODES, []),
        (FACTORS, {"car": {"label": "Carro"}}, []),
    ]
    for factors, modes, routes in bad_inputs:
        try:
            build_reference_data(factors, modes, routes)
        except ReferenceDataError:
            continue
        raise AssertionError(f"Expected ReferenceDataError for {factors}, {routes}")

    try:
        build_reference_data(FACTORS, MODES, [], price_min_brl=200, price_max_brl=100)
    except ReferenceDataError:
        pass
    else:
        raise AssertionError("Expected ReferenceDataError for inverted price range")
    print("PASS")


def test_reference_data_is_read_only():
    print("Running test_reference_data_is_read_only...")
    reference = build_reference_data(FACTORS, MODES, [("A", "B", 10)])
    try:
        reference.emission_factors["car"] = 1.0
    except TypeError:
        pass
    else:
        raise AssertionError("emission_factors should be read-only")
    assert isinstance(reference.routes, tuple)
    print("PASS")


if __name__ == "__main__":
    test_emission_fallbacks_never_raise()
    test_large_finite_inputs_never_raise()
    test_emission_outcome_statuses()
    test_all_modes_without_baseline()
    test_all_modes_with_zero_baseline()
    test_credit_constants_missing()
    test_non_numeric_credit_inputs()
    test_malformed_reference_data_is_fatal()
    test_reference_data_is_read_only()
    print("\nALL TESTS PASSED SUCCESSFULLY")
