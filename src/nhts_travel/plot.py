"""
Faceted bar chart of average weighted travel distance.

One panel per income tier, density tiers along x, bars dodged by mode tier.
Styling comes from an explicit ``ChartStyle`` applied through
``matplotlib.rc_context`` so global rcParams are left alone.
"""

from dataclasses import dataclass, field
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.ticker import StrMethodFormatter

from nhts_travel.classify import (
    ACTIVE_TRANSIT,
    CAR_TRUCK,
    DENSITY_ORDER,
    INCOME_ORDER,
)
from nhts_travel.errors import EmptySummaryError


@dataclass(frozen=True)
class ChartStyle:
    """Fonts, colours and geometry for the distance chart."""

    font_family: str = "DejaVu Sans"
    base_font_size: float = 6.0
    mode_colors: dict[str, str] = field(
        default_factory=lambda: {ACTIVE_TRANSIT: "#1b9e77", CAR_TRUCK: "#d95f02"}
    )
    figsize: tuple[float, float] = (4.8, 4.8)
    dpi: int = 300
    facecolor: str = "white"
    bar_width: float = 0.4
    title: str = "Weighted travel distance per household"
    xlabel: str = "Population density (persons / sq mi)"
    ylabel: str = "Average weighted distance (miles)"

    def rc_params(self) -> dict:
        return {
            "font.family": self.font_family,
            "font.size": self.base_font_size,
            "axes.titlesize": self.base_font_size + 1,
            "figure.facecolor": self.facecolor,
            "axes.facecolor": self.facecolor,
            "savefig.facecolor": self.facecolor,
        }


def render_chart(summary: pd.DataFrame, path: Path, style: ChartStyle | None = None) -> Path:
    """
    Draw the summary table and write it to ``path`` as a raster image.

    An existing file at ``path`` is overwritten.
    """
    if summary.empty:
        raise EmptySummaryError("No summary cells to chart")
    style = style or ChartStyle()
    modes = list(style.mode_colors)

    with plt.rc_context(style.rc_params()):
        fig, axes = plt.subplots(
            1, len(INCOME_ORDER), figsize=style.figsize, sharey=True
        )
        try:
            x = np.arange(len(DENSITY_ORDER))

            for ax, income in zip(axes, INCOME_ORDER):
                panel = summary[summary["income_tier"] == income]
                for i, mode in enumerate(modes):
                    cells = panel[panel["mode_tier"] == mode].set_index("density_tier")
                    vals = [
                        cells["avg_distance"].get(d, np.nan) for d in DENSITY_ORDER
                    ]
                    offset = (i - (len(modes) - 1) / 2) * style.bar_width
                    ax.bar(
                        x + offset, vals, style.bar_width,
                        color=style.mode_colors[mode], label=mode,
                    )
                ax.set_xticks(x)
                ax.set_xticklabels(DENSITY_ORDER, rotation=90)
                ax.set_title(income, fontweight="bold")
                ax.yaxis.set_major_formatter(StrMethodFormatter("{x:,.0f}"))
                ax.grid(axis="y", linewidth=0.3, alpha=0.5)
                ax.set_axisbelow(True)

            axes[0].set_ylabel(style.ylabel)
            fig.supxlabel(style.xlabel, fontsize=style.base_font_size)
            fig.suptitle(style.title, fontweight="bold")
            handles, labels = axes[0].get_legend_handles_labels()
            fig.legend(
                handles, labels, loc="lower center", ncol=len(modes),
                bbox_to_anchor=(0.5, 0.0), frameon=False,
            )
            fig.tight_layout(rect=(0, 0.05, 1, 1))

            path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(path, dpi=style.dpi, facecolor=style.facecolor)
        finally:
            plt.close(fig)

    print(f"  Saved: {path}")
    return path
