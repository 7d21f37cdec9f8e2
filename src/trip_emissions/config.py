import os
import pandas as pd
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# The parameter workbook lives in the project root:
#   <root>/data/parameters_config/project_parameters.xlsx
# This file is <root>/src/trip_emissions/config.py, so the root is three levels up.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.environ.get(
    "TRIP_EMISSIONS_CONFIG",
    os.path.join(PROJECT_ROOT, "data", "parameters_config", "project_parameters.xlsx"),
)


def load_excel_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load ambient settings from an Excel file.
    Expected columns: Key, Value (Section, Unit, Description are informative only).
    Returns a dictionary of Key -> Value, empty when the file is missing.
    """
    config = {}
    if not os.path.exists(path):
        logger.info(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        df = pd.read_excel(path, engine="openpyxl")
        if "Key" in df.columns and "Value" in df.columns:
            for _, row in df.iterrows():
                if pd.isna(row["Key"]):
                    continue
                key = str(row["Key"]).strip()
                val = row["Value"]
                if pd.isna(val):
                    continue
                config[key] = val
            logger.info(f"Loaded {len(config)} parameters from {path}")
        else:
            logger.warning(f"Excel file {path} missing 'Key' or 'Value' columns.")
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")

    return config
