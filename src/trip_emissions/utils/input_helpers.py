import logging
import pandas as pd
from typing import Optional, List

from colorama import Fore, Style, Back

from ..models import ModeEmission, ReferenceData, TripResult
from ..constants import DISPLAY_DECIMALS, DISPLAY_CREDIT_DECIMALS
from ..reference import REFERENCE_DATA
from .routes import list_cities, suggest_cities

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_RESET = Style.RESET_ALL

BAR_WIDTH = 30


# ============================================================================
# pt-BR FORMATTING
# ============================================================================

def format_number(value, decimals: int = DISPLAY_DECIMALS) -> str:
    """
    Format a number with fixed decimals and pt-BR separators: 1234.5 -> '1.234,50'.
    Non-numeric input is shown as 0.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = 0.0
    if number != number:  # NaN
        number = 0.0
    text = f"{number:,.{decimals}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency(value) -> str:
    """Brazilian Real: 'R$ 1.234,56'."""
    text = format_number(value, 2)
    if text.startswith("-"):
        return f"-R$ {text[1:]}"
    return f"R$ {text}"


def mode_display(mode: str, reference: ReferenceData = REFERENCE_DATA) -> str:
    """Icon and label for a mode; unknown modes show a question mark and the raw id."""
    meta = reference.transport_modes.get(mode)
    if meta is None:
        return f"❓ {mode}"
    return f"{meta.icon} {meta.label}"


# ============================================================================
# PROMPTS
# ============================================================================

def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")
    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx - 1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_yes_no(label: str, default: bool) -> bool:
    """
    Prompt user for yes/no answer, returning True/False.
    """
    d = "y" if default else "n"
    opts = f"{C_CHOICE}y{C_PROMPT}/{C_CHOICE}n{C_PROMPT}"
    while True:
        s = input(style_prompt(f"{label} [{opts}] (default={d}): ")).strip().lower()
        if not s:
            return default
        if s in ("y", "yes", "s", "sim"):
            return True
        if s in ("n", "no", "nao", "não"):
            return False
        logger.warning("Please answer y or n.")


def prompt_float(label: str, default: Optional[float] = None, positive: bool = True) -> float:
    """
    Prompt for a number. Accepts '1234.5' and pt-BR '1.234,5'.
    Re-prompts until the value parses (and is > 0 when positive=True).
    """
    suffix = f" [default={default}]" if default is not None else ""
    while True:
        s = input(style_prompt(f"{label}{suffix}: ")).strip()
        if not s and default is not None:
            return default
        if "," in s:
            s = s.replace(".", "").replace(",", ".")
        try:
            value = float(s)
        except ValueError:
            logger.warning(f"'{s}' is not a number.")
            continue
        if positive and value <= 0:
            logger.warning("Value must be greater than 0.")
            continue
        return value


def prompt_city(label: str, reference: ReferenceData = REFERENCE_DATA) -> str:
    """
    Prompt for a city name. Typing '?' lists every known city; a partial
    name lists the matching ones. Unknown cities are accepted as typed.
    """
    while True:
        s = input(style_prompt(f"{label} (type '?' to list known cities): ")).strip()
        if not s:
            continue
        if s == "?":
            for city in list_cities(reference):
                print(f"  {C_CHOICE}{city}{C_RESET}")
            continue
        if s.endswith("?"):
            matches = suggest_cities(s[:-1], reference)
            if matches:
                for city in matches:
                    print(f"  {C_CHOICE}{city}{C_RESET}")
            else:
                logger.warning("No known city matches that prefix.")
            continue
        return s


# ============================================================================
# REPORTS
# ============================================================================

def print_trip_overview(result: TripResult, reference: ReferenceData = REFERENCE_DATA):
    """Route, distance, emission, transport and (if any) savings vs the baseline mode."""
    print(f"\n{Back.BLACK}{C_HEADER}{'='*60}")
    print("   RESULTS")
    print(f"{'='*60}{Style.RESET_ALL}")

    source = " (route table)" if result.distance_source == "route_table" else ""
    print(f"  Route:      {result.origin} → {result.destination}")
    print(f"  Distance:   {format_number(result.distance_km)} km{source}")
    print(f"  Emissions:  🌿 {C_SUCCESS}{format_number(result.emission_kg)}{C_RESET} kg CO₂e")
    print(f"  Transport:  {mode_display(result.mode, reference)}")

    s = result.savings
    if result.mode != reference.baseline_mode and (s.saved_kg or s.percentage):
        pct = f"{format_number(s.percentage)}%" if s.percentage is not None else "-"
        baseline_label = mode_display(reference.baseline_mode, reference)
        print(f"  Savings vs {baseline_label}: {format_number(s.saved_kg)} kg ({pct})")
    print(f"{'='*60}")


def print_mode_comparison(
    comparison: List[ModeEmission], selected_mode: Optional[str] = None,
    reference: ReferenceData = REFERENCE_DATA
):
    """
    One bar per mode, scaled to the highest emission. Modes arrive sorted,
    so the greenest option is printed first.
    """
    print(f"\n{C_HEADER}Comparison across transport modes:{C_RESET}")
    max_emission = max((m.emission for m in comparison), default=0) or 1

    for item in comparison:
        share = item.emission / max_emission
        bar = "█" * int(round(share * BAR_WIDTH))
        color = C_SUCCESS
        if share > 0.75:
            color = C_ERROR
        elif share > 0.25:
            color = C_PROMPT

        vs_car = ""
        if item.percentage_vs_car is not None:
            vs_car = f" ({format_number(item.percentage_vs_car)}% vs {reference.baseline_mode})"
        marker = f" {C_CHOICE}<- selected{C_RESET}" if item.mode == selected_mode else ""

        print(f"  {mode_display(item.mode, reference):<14} {format_number(item.emission):>10} kg{vs_car}{marker}")
        print(f"  {color}{bar:<{BAR_WIDTH}}{C_RESET}")

    print("\nTip: choose more efficient modes to reduce your emissions.")


def print_carbon_credits(result: TripResult, reference: ReferenceData = REFERENCE_DATA):
    credits = result.credits
    credit_cfg = reference.carbon_credit
    print(f"\n{C_HEADER}Carbon credits:{C_RESET}")
    print(f"  Credits needed:   {format_number(credits.credits, DISPLAY_CREDIT_DECIMALS)}")
    if credit_cfg is not None and credit_cfg.kg_per_credit:
        print(f"  (1 crédito = {format_number(credit_cfg.kg_per_credit, 0)} kg CO₂e)")
    print(f"  Estimated price:  {C_SUCCESS}{format_currency(credits.price_average)}{C_RESET}")
    print(f"  Range:            {format_currency(credits.price_min)} - {format_currency(credits.price_max)}")
    print("\nCarbon credits offset emissions by funding projects that capture or reduce greenhouse gases.")


# ============================================================================
# BATCH REPORT
# ============================================================================

REPORT_COLUMNS = [
    ("Origin", ""),
    ("Destination", ""),
    ("Mode", ""),
    ("Distance (km)", 0.0),
    ("Distance Source", ""),
    ("Emissions (kgCO2e)", 0.0),
    ("Baseline Emissions (kgCO2e)", 0.0),
    ("Saved vs Baseline (kgCO2e)", 0.0),
    ("Saved vs Baseline (%)", ""),  # blank when the baseline emission is 0
    ("Greenest Mode", ""),
    ("Carbon Credits", 0.0),
    ("Price Min (BRL)", 0.0),
    ("Price Max (BRL)", 0.0),
    ("Price Avg (BRL)", 0.0),
]


def format_and_clean_report_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """
    Put the batch report into its published shape:
    - known columns first, in a fixed order (missing ones are added)
    - per-mode comparison columns ("[Mode] ...") next, in input order
    - any other column kept at the end
    - NaN replaced by the column's empty value (0.0 or "")
    """
    df = df.copy()

    for col, empty in REPORT_COLUMNS:
        if col not in df.columns:
            df[col] = empty
        else:
            df[col] = df[col].fillna(empty)

    known = [col for col, _ in REPORT_COLUMNS]
    mode_cols = [c for c in df.columns if c.startswith("[Mode] ")]
    extra = [c for c in df.columns if c not in known and c not in mode_cols]

    for col in mode_cols:
        df[col] = df[col].fillna(0.0)
    for col in extra:
        df[col] = df[col].fillna("")

    return df[known + mode_cols + extra]
