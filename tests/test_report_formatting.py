import sys
import os
import pandas as pd
import numpy as np

# Add src to path
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src"))

from trip_emissions.utils.input_helpers import (
    format_and_clean_report_dataframe, format_number, format_currency, mode_display
)


def test_dataframe_formatting():
    print("Running test_dataframe_formatting...")

    data = {
        "ExtraColumn": ["KeepMe", np.nan],
        "Mode": ["bus", "car"],
        "[Mode] bus (kgCO2e)": [38.27, np.nan],
        "Emissions (kgCO2e)": [38.27, 51.6],
        "Origin": ["São Paulo, SP", "São Paulo, SP"],
        "Destination": ["Rio de Janeiro, RJ", "Rio de Janeiro, RJ"],
        "Saved vs Baseline (%)": [25.83, np.nan],
    }
    formatted = format_and_clean_report_dataframe(pd.DataFrame(data))
    cols = list(formatted.columns)

    # 1. Order
    assert cols[:3] == ["Origin", "Destination", "Mode"]
    assert cols[-2:] == ["[Mode] bus (kgCO2e)", "ExtraColumn"]

    # 2. Missing columns added
    assert "Carbon Credits" in cols
    assert (formatted["Carbon Credits"] == 0.0).all()

    # 3. NaNs filled
    assert not formatted.isnull().values.any()
    assert formatted.loc[1, "Saved vs Baseline (%)"] == ""
    assert formatted.loc[1, "[Mode] bus (kgCO2e)"] == 0.0

    # 4. Values kept
    assert formatted.loc[0, "Emissions (kgCO2e)"] == 38.27
    print("PASS")


def test_pt_br_number_formatting():
    print("Running test_pt_br_number_formatting...")
    assert format_number(1234.5, 2) == "1.234,50"
    assert format_number(-1234567.891, 2) == "-1.234.567,89"
    assert format_number(0.0383, 4) == "0,0383"
    assert format_number(None, 2) == "0,00"
    assert format_number(float("nan"), 2) == "0,00"
    assert format_currency(100) == "R$ 100,00"
    assert format_currency(1915.5) == "R$ 1.915,50"
    assert format_currency(-5) == "-R$ 5,00"
    print("PASS")


def test_mode_display():
    print("Running test_mode_display...")
    assert mode_display("bus") == "🚌 Ônibus"
    assert mode_display("plane") == "❓ plane"
    print("PASS")


if __name__ == "__main__":
    test_dataframe_formatting()
    test_pt_br_number_formatting()
    test_mode_display()
    print("ALL TESTS PASSED")
