"""Weighted household counts and average distance per (density, income, mode) cell."""

from pathlib import Path

import pandas as pd

from nhts_travel.classify import DENSITY_ORDER, INCOME_ORDER, MODE_ORDER, OTHER_MODE
from nhts_travel.errors import DivisionError

TIER_COLUMNS = ["density_tier", "income_tier", "mode_tier"]
TIER_ORDERS = {
    "density_tier": DENSITY_ORDER,
    "income_tier": INCOME_ORDER,
    "mode_tier": MODE_ORDER,
}


def summarize_cells(classified: pd.DataFrame) -> pd.DataFrame:
    """
    Group classified rows into tier cells and compute weighted averages.

    Parameters
    ----------
    classified : pd.DataFrame
        Output of ``classify_households``.

    Returns
    -------
    pd.DataFrame
        Columns density_tier, income_tier, mode_tier (ordered categoricals),
        households, total_distance, avg_distance. Cells for the "other" mode
        tier are dropped; rows are sorted by tier order.

    Raises
    ------
    DivisionError
        If a retained cell has a household weight of exactly zero.
    """
    summary = (
        classified.groupby(TIER_COLUMNS, as_index=False)
        .agg(
            households=("WTHHFIN", "sum"),
            total_distance=("weighted_distance", "sum"),
        )
    )
    summary = summary[summary["mode_tier"] != OTHER_MODE].copy()

    degenerate = summary[summary["households"] == 0]
    if not degenerate.empty:
        cells = degenerate[TIER_COLUMNS].to_records(index=False).tolist()
        raise DivisionError(f"Zero household weight in summary cells: {cells}")

    summary["avg_distance"] = summary["total_distance"] / summary["households"]

    for col, order in TIER_ORDERS.items():
        summary[col] = pd.Categorical(summary[col], categories=order, ordered=True)
    summary = summary.sort_values(TIER_COLUMNS).reset_index(drop=True)

    print(f"  Summary cells: {len(summary):,}")
    return summary


def write_summary(summary: pd.DataFrame, path: Path) -> Path:
    """Save the summary table as CSV, creating the parent directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(path, index=False)
    print(f"  Saved: {path}")
    return path
