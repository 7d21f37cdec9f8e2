import sys
import os

# Add src to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src"))

from trip_emissions.utils.calculations import (
    round_half_up, emission, emission_for_all_modes, savings,
    carbon_credits, estimate_credit_price, estimate_credits
)
from trip_emissions.reference import REFERENCE_DATA, build_reference_data


def test_rounding_is_half_away_from_zero():
    print("Testing rounding rule...")
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(2.675, 2) == 2.68  # built-in round() gives 2.67
    assert round_half_up(-0.125, 2) == -0.13
    assert round_half_up(0.00005, 4) == 0.0001
    assert str(round_half_up(-0.001, 2)) == "0.0"
    assert round_half_up(1e27, 2) == 1e27
    assert round_half_up(-1e300, 4) == -1e300
    assert round_half_up(float("inf"), 2) == float("inf")
    print("PASS")


def test_emission_per_mode():
    print("Testing emission = distance * factor...")
    # 430 km São Paulo -> Rio de Janeiro
    assert emission(430, "bus") == 38.27
    assert emission(430, "car") == 51.6
    assert emission(430, "truck") == 412.8
    assert emission(430, "bicycle") == 0.0

    for mode, factor in REFERENCE_DATA.emission_factors.items():
        for d in (1, 13, 95.5, 1410):
            assert emission(d, mode) == round_half_up(d * factor, 2), (mode, d)
    print("PASS")


def test_all_modes_sorted_with_car_percentage():
    print("Testing all-mode comparison...")
    results = emission_for_all_modes(430)

    assert [r.mode for r in results] == ["bicycle", "bus", "car", "truck"]
    assert [r.emission for r in results] == [0.0, 38.27, 51.6, 412.8]
    by_mode = {r.mode: r.percentage_vs_car for r in results}
    assert by_mode == {"bicycle": 0.0, "bus": 74.17, "car": 100.0, "truck": 800.0}
    print("PASS")


def test_all_modes_ties_keep_declaration_order():
    print("Testing stable ordering of equal emissions...")
    reference = build_reference_data(
        {"walk": 0.0, "bicycle": 0.0, "car": 0.12, "scooter": 0.12},
        {
            "walk": {"label": "A pé", "icon": "🚶", "color": "#000000"},
            "bicycle": {"label": "Bicicleta", "icon": "🚲", "color": "#000000"},
            "car": {"label": "Carro", "icon": "🚗", "color": "#000000"},
            "scooter": {"label": "Patinete", "icon": "🛴", "color": "#000000"},
        },
        [],
    )
    results = emission_for_all_modes(100, reference=reference)
    assert [r.mode for r in results] == ["walk", "bicycle", "car", "scooter"]
    print("PASS")


def test_savings_example_bus_vs_car():
    print("Testing savings bus vs car at 430 km...")
    s = savings(emission(430, "bus"), emission(430, "car"))
    assert s.saved_kg == 13.33
    # 13.33 / 51.6 * 100 = 25.833...
    assert s.percentage == 25.83
    print("PASS")


def test_savings_guards_zero_baseline():
    print("Testing savings with zero/negative baseline...")
    assert savings(10, 0).percentage is None
    assert savings(10, 0).saved_kg == -10.0
    assert savings(0, -5).percentage is None
    assert savings(12.5, 20).saved_kg == 7.5
    assert savings(12.5, 20).percentage == 37.5
    # Worse than the baseline gives negative savings
    assert savings(412.8, 51.6).percentage == -700.0
    print("PASS")


def test_carbon_credits():
    print("Testing carbon credit conversion...")
    assert carbon_credits(0) == 0
    assert carbon_credits(1000) == 1.0
    assert carbon_credits(38.27) == 0.0383
    assert carbon_credits(412.8) == 0.4128
    print("PASS")


def test_credit_price_range():
    print("Testing credit price estimate...")
    price = estimate_credit_price(1.0)
    assert (price.min, price.max, price.average) == (50.0, 150.0, 100.0)

    price = estimate_credit_price(0.5)
    assert (price.min, price.max, price.average) == (25.0, 75.0, 50.0)

    for credits in (0.0383, 0.4128, 2.5):
        p = estimate_credit_price(credits)
        assert p.average == round_half_up((credits * 50 + credits * 150) / 2, 2)
    print("PASS")


def test_estimate_credits_combines_both_steps():
    print("Testing credit estimate for 1000 kg...")
    est = estimate_credits(1000)
    assert est.credits == 1.0
    assert (est.price_min, est.price_max, est.price_average) == (50.0, 150.0, 100.0)
    print("PASS")


if __name__ == "__main__":
    test_rounding_is_half_away_from_zero()
    test_emission_per_mode()
    test_all_modes_sorted_with_car_percentage()
    test_all_modes_ties_keep_declaration_order()
    test_savings_example_bus_vs_car()
    test_savings_guards_zero_baseline()
    test_carbon_credits()
    test_credit_price_range()
    test_estimate_credits_combines_both_steps()
    print("\nALL TESTS PASSED SUCCESSFULLY")
