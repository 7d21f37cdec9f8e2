import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional

from .constants import REPORTS_DIR, AUDIT_ENABLED

logger = logging.getLogger(__name__)


class CalculationAudit:
    """
    Append-only text log of trip calculation steps, one file per session.
    The file is created on the first logged step.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(CalculationAudit, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return

        self.enabled = AUDIT_ENABLED
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_dir = REPORTS_DIR
        self.log_file: Optional[str] = None
        self.initialized = True

    def _open_session(self) -> str:
        os.makedirs(self.log_dir, exist_ok=True)
        path = os.path.join(self.log_dir, f"audit_{self.session_id}.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write("=== TRIP EMISSIONS CALCULATION AUDIT LOG ===\n")
            f.write(f"Session: {self.session_id}\n")
            f.write("============================================\n\n")
        return path

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: Any, unit: str = ""):
        """
        Log a calculation step to the audit file.

        Args:
            context: What is being calculated (e.g., "Emission: São Paulo, SP -> Santos, SP")
            formula: Text form of the equation (e.g., "Distance(km) * EF(kgCO2e/km)")
            variables: Actual values used (e.g., {"Distance_km": 75, "EF": 0.12})
            result: The final result (None is written as "n/a")
            unit: Unit of the result (e.g., "kgCO2e")
        """
        if not self.enabled:
            return

        try:
            if self.log_file is None:
                self.log_file = self._open_session()

            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {context}\n")
                f.write(f"  Formula: {formula}\n")
                vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
                f.write(f"  Inputs:  {vars_str}\n")
                result_str = "n/a" if result is None else f"{result:.4f}"
                f.write(f"  Result:  {result_str} {unit}\n")
                f.write("-" * 40 + "\n")
        except Exception as e:
            logger.error(f"Failed to write to audit log: {e}")


# Global Accessor
audit_logger = CalculationAudit()
