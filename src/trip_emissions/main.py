import logging
import os
from datetime import datetime
from typing import Optional

import pandas as pd

from .constants import REPORTS_DIR, LOG_FILE
from .models import ReferenceData, TripRequest
from .reference import REFERENCE_DATA
from .trips import TripInputError, calculate_trip, resolve_mode
from .utils.routes import find_distance
from .utils.input_helpers import (
    prompt_choice, prompt_yes_no, prompt_float, prompt_city, print_header,
    print_trip_overview, print_mode_comparison, print_carbon_credits,
    mode_display, format_and_clean_report_dataframe, format_number,
    C_SUCCESS, C_RESET
)
from .logging_conf import setup_logging
from .visualization import Visualizer

logger = logging.getLogger(__name__)

REPORT_BASENAME = "trip_emissions_report"


def load_trip_table(path: str) -> pd.DataFrame:
    """
    Read a batch of trips from .xlsx or .csv.
    Required columns: Origin, Destination, Mode. Optional: Distance (km).
    """
    if path.lower().endswith((".xlsx", ".xls")):
        df = pd.read_excel(path, engine="openpyxl")
    else:
        df = pd.read_csv(path)

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in ("Origin", "Destination", "Mode") if c not in df.columns]
    if missing:
        raise ValueError(f"Invalid trip table: missing column(s) {', '.join(missing)}")
    return df


def _cell(row, column) -> Optional[object]:
    value = row.get(column)
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def execute_trip_batch(
    df: pd.DataFrame,
    reports_dir: str = REPORTS_DIR,
    reference: ReferenceData = REFERENCE_DATA,
    visualize: bool = True
) -> pd.DataFrame:
    """
    Calculate every trip in df and save the report as CSV in reports_dir.
    Rows with invalid input are logged and skipped.
    Returns the formatted report (empty if no row could be calculated).
    """
    os.makedirs(reports_dir, exist_ok=True)
    results = []

    print_header(f"Starting analysis of {len(df)} trips...")

    for idx, row in df.iterrows():
        try:
            origin = str(_cell(row, "Origin") or "")
            destination = str(_cell(row, "Destination") or "")
            raw_mode = _cell(row, "Mode")
            mode = resolve_mode(raw_mode, reference) or (str(raw_mode) if raw_mode is not None else None)
            distance = _cell(row, "Distance (km)")

            logger.info(f"Processing ({idx + 1}/{len(df)}): {origin} -> {destination} [{mode}]")

            request = TripRequest(origin=origin, destination=destination, mode=mode, distance_km=distance)
            res = calculate_trip(request, reference)

            entry = {
                "Origin": res.origin,
                "Destination": res.destination,
                "Mode": res.mode,
                "Distance (km)": res.distance_km,
                "Distance Source": res.distance_source,
                "Emissions (kgCO2e)": res.emission_kg,
                "Baseline Emissions (kgCO2e)": res.baseline_kg,
                "Saved vs Baseline (kgCO2e)": res.savings.saved_kg,
                "Saved vs Baseline (%)": res.savings.percentage,
                "Greenest Mode": res.greenest_mode.mode if res.greenest_mode else "",
                "Carbon Credits": res.credits.credits,
                "Price Min (BRL)": res.credits.price_min,
                "Price Max (BRL)": res.credits.price_max,
                "Price Avg (BRL)": res.credits.price_average,
            }
            for item in res.comparison:
                entry[f"[Mode] {item.mode} (kgCO2e)"] = item.emission

            results.append(entry)
        except TripInputError as e:
            logger.error(f"Row {idx + 1} skipped: {e}")
        except Exception as e:
            logger.error(f"Error processing row {idx + 1}: {e}. Skipping trip.")

    if not results:
        logger.warning("No results to save.")
        return pd.DataFrame()

    report_df = format_and_clean_report_dataframe(pd.DataFrame(results))

    out_file = os.path.join(reports_dir, f"{REPORT_BASENAME}.csv")
    try:
        report_df.to_csv(out_file, index=False)
    except PermissionError:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_file = os.path.join(reports_dir, f"{REPORT_BASENAME}_{ts}.csv")
        logger.warning(f"Could not save report (file locked?). Saving to {out_file} instead.")
        report_df.to_csv(out_file, index=False)
    logger.info(f"Report saved to: {out_file}")

    print(report_df.groupby("Mode")[["Emissions (kgCO2e)", "Carbon Credits"]].sum())

    if visualize:
        try:
            vis = Visualizer(mode="batch_run", output_root=reports_dir, reference=reference)
            vis.plot_batch_summary(report_df)
            logger.info(f"Charts saved to: {vis.session_dir}")
        except Exception as e:
            logger.error(f"Batch visualization failed: {e}")

    return report_df


def run_automated_analysis():
    """Ask for a trip table and run the batch."""
    print_header("Automated Analysis (Batch Mode)")
    path = input("Path to trip table (.xlsx or .csv): ").strip().strip('"')
    if not os.path.exists(path):
        logger.error(f"Trip table not found at {path}")
        return

    try:
        df = load_trip_table(path)
    except Exception as e:
        logger.error(f"Error reading trip table: {e}")
        return

    print(f"\n{C_SUCCESS}Loaded {len(df)} trips.{C_RESET}")
    execute_trip_batch(df)


def prompt_trip(reference: ReferenceData = REFERENCE_DATA) -> TripRequest:
    """Collect one trip from the terminal, autofilling the distance when the route is known."""
    print_header("Step 1: Route")
    origin = prompt_city("Origin", reference)
    destination = prompt_city("Destination", reference)

    manual = False
    distance = find_distance(origin, destination, reference)
    if distance is not None:
        logger.info(f"  -> Distance filled in automatically: {format_number(distance)} km")
        manual = prompt_yes_no("Enter the distance manually instead?", default=False)
    else:
        logger.warning("Distance not found for this route. Please enter it manually.")
        manual = True
    if manual:
        distance = prompt_float("Distance (km)")

    print_header("Step 2: Transport Mode")
    for mode in reference.emission_factors:
        print(f"  {mode:<8} {mode_display(mode, reference)}")
    mode = prompt_choice("Transport mode", list(reference.emission_factors), default=reference.baseline_mode)

    return TripRequest(
        origin=origin, destination=destination, mode=mode,
        distance_km=distance, manual_distance=manual,
    )


def run_single_trip(reference: ReferenceData = REFERENCE_DATA):
    while True:
        request = prompt_trip(reference)
        try:
            result = calculate_trip(request, reference)
            break
        except TripInputError as e:
            logger.error(str(e))

    print_trip_overview(result, reference)
    print_mode_comparison(result.comparison, selected_mode=result.mode, reference=reference)
    print_carbon_credits(result, reference)

    if prompt_yes_no("Save a comparison chart?", default=False):
        try:
            vis = Visualizer(mode="single_run", reference=reference)
            vis.plot_mode_comparison(
                result.comparison, selected_mode=result.mode,
                title=f"{result.origin} → {result.destination} ({format_number(result.distance_km)} km)"
            )
        except Exception as e:
            logger.error(f"Visualization failed: {e}")


def main():
    setup_logging(console_level=logging.INFO, file_path=LOG_FILE)

    print_header("Trip emissions & carbon credits calculator")

    mode = prompt_choice("Mode", ["Single Trip (Interactive)", "Automated Analysis (Batch)"],
                         default="Single Trip (Interactive)")
    if mode == "Automated Analysis (Batch)":
        run_automated_analysis()
        return

    run_single_trip()
    while prompt_yes_no("Calculate another trip?", default=False):
        run_single_trip()


if __name__ == "__main__":
    main()
