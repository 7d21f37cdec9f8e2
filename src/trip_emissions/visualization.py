import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import os
from datetime import datetime
from typing import List, Optional
from .models import ModeEmission, ReferenceData
from .reference import REFERENCE_DATA
from .constants import REPORTS_DIR
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================


class Visualizer:
    def __init__(self, mode: str = "single_run", output_root: Optional[str] = None,
                 reference: ReferenceData = REFERENCE_DATA):
        """
        mode: 'single_run' (interactive) or 'batch_run' (batch analysis)
        output_root: directory that receives <mode>/<timestamp>/ folders
        """
        self.mode = mode
        self.output_root = output_root or REPORTS_DIR
        self.reference = reference
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Configure matplotlib for clean, report-quality plots."""
        plt.rcParams.update(plt.rcParamsDefault)

        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'xtick.labelsize': 11,
            'ytick.labelsize': 11,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50'
        })

        plt.rcParams.update({
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.spines.left': False,
            'axes.spines.bottom': True,
            'axes.linewidth': 1.2,
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'grid.linewidth': 1.0,
            'axes.grid': True,
            'axes.grid.axis': 'y',
            'axes.axisbelow': True
        })

        self.colors = {
            'selected_edge': '#2C3E50',
            'credits': '#388E3C',
            'neutral': '#5D6D7E',
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        """Create the directory for this session's plots."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        subdir = "batch_run" if self.mode == "batch_run" else "single_run"
        path = os.path.join(self.output_root, subdir, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def _mode_label(self, mode: str) -> str:
        meta = self.reference.transport_modes.get(mode)
        return meta.label if meta else mode

    def _mode_color(self, mode: str) -> str:
        meta = self.reference.transport_modes.get(mode)
        return meta.color if meta else self.colors['neutral']

    # ============================================================================
    # SINGLE RUN PLOTS
    # ============================================================================

    def plot_mode_comparison(self, comparison: List[ModeEmission], selected_mode: Optional[str] = None,
                             title: str = "") -> Optional[str]:
        """Bar chart of emissions per mode; the selected mode gets an outline."""
        if not comparison:
            return None

        labels = [self._mode_label(m.mode) for m in comparison]
        values = [m.emission for m in comparison]
        colors = [self._mode_color(m.mode) for m in comparison]

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        bars = ax.bar(labels, values, color=colors, alpha=0.85, width=0.6, edgecolor='none')

        top = max(values) if max(values) > 0 else 1.0
        for bar, item in zip(bars, comparison):
            if item.mode == selected_mode:
                bar.set_edgecolor(self.colors['selected_edge'])
                bar.set_linewidth(2.5)
            tag = f"{item.emission:.2f} kg"
            if item.percentage_vs_car is not None:
                tag += f"\n{item.percentage_vs_car:.0f}%"
            ax.text(bar.get_x() + bar.get_width() / 2., bar.get_height() + top * 0.01, tag,
                    ha='center', va='bottom', fontsize=10, fontweight='bold', color=self.colors['text'])

        ax.set_ylabel("Emissions (kg CO2e)", fontweight='bold')
        ax.set_ylim(0, top * 1.2)
        ax.set_title(f"Emissions by transport mode\n{title}", pad=20, loc='left')
        plt.tight_layout()

        filepath = self.get_save_path("mode_comparison.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved comparison to: {filepath}")
        return filepath

    # ============================================================================
    # BATCH ANALYSIS PLOTS
    # ============================================================================

    def plot_batch_summary(self, df: pd.DataFrame) -> Optional[str]:
        """Total emissions (bars) and credits (line) per selected mode across the batch."""
        if df.empty:
            return None

        grouped = df.groupby("Mode", sort=False)[["Emissions (kgCO2e)", "Carbon Credits"]].sum()
        modes = list(grouped.index)
        labels = [self._mode_label(m) for m in modes]

        fig, ax1 = plt.subplots(figsize=(12, 7), dpi=150)
        ax1.bar(labels, grouped["Emissions (kgCO2e)"], color=[self._mode_color(m) for m in modes],
                alpha=0.85, width=0.5, label='Total Emissions')
        ax1.set_ylabel('Total Emissions (kg CO2e)', fontweight='bold')

        ax2 = ax1.twinx()
        ax2.plot(labels, grouped["Carbon Credits"], color=self.colors['credits'], marker='o', linewidth=3,
                 markersize=10, markerfacecolor='white', markeredgewidth=2, label='Carbon Credits')
        ax2.set_ylabel('Carbon Credits', color=self.colors['credits'], fontweight='bold')
        ax2.grid(False)

        plt.title(f"Batch summary: {len(df)} trips", pad=20, loc='left')
        plt.tight_layout()

        filepath = self.get_save_path("batch_summary.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved batch summary to: {filepath}")
        return filepath
