"""
NHTS 2017: average weighted travel distance by density, income and mode.

Steps:
1. Download the NHTS CSV archive (household, trip, person tables)
2. Sum weighted trip miles per household and mode
3. Join onto households and classify density / income / mode tiers
4. Summarise weighted households and average distance per cell
5. Render the faceted bar chart and save the summary table

Usage:
    uv run python -m nhts_travel
"""

import sys
from pathlib import Path

import pandas as pd

from nhts_travel.aggregate import household_mode_distance
from nhts_travel.classify import classify_households, join_distances
from nhts_travel.errors import EmptySummaryError, PipelineError
from nhts_travel.fetch import DOWNLOAD_TIMEOUT, NHTS_URL, SurveyTables, fetch_survey
from nhts_travel.paths import FIGURE_DIR, RESULTS_DIR
from nhts_travel.plot import ChartStyle, render_chart
from nhts_travel.summarize import summarize_cells, write_summary

FIGURE_PATH = FIGURE_DIR / "nhts_distance_by_mode.png"
SUMMARY_PATH = RESULTS_DIR / "nhts_distance_by_mode.csv"


def build_summary(tables: SurveyTables) -> pd.DataFrame:
    """Run the aggregate -> join/classify -> summarise stages on loaded tables."""
    print("\n[2/5] Aggregating trip distance...")
    distances = household_mode_distance(tables.trips)

    print("\n[3/5] Joining and classifying households...")
    joined = join_distances(tables.households, distances)
    classified = classify_households(joined)

    print("\n[4/5] Summarising cells...")
    summary = summarize_cells(classified)
    if summary.empty:
        raise EmptySummaryError(
            "No household has a known density and income tier with an "
            "active/transit or car/truck trip"
        )
    return summary


def run(
    url: str = NHTS_URL,
    figure_path: Path = FIGURE_PATH,
    summary_path: Path | None = SUMMARY_PATH,
    style: ChartStyle | None = None,
    timeout: int = DOWNLOAD_TIMEOUT,
) -> Path:
    """Run the full pipeline and return the path of the written chart."""
    print("=" * 60)
    print("NHTS Travel Distance by Density, Income and Mode")
    print("=" * 60)

    print("\n[1/5] Fetching survey tables...")
    tables = fetch_survey(url, timeout=timeout)

    summary = build_summary(tables)

    print("\n[5/5] Rendering chart...")
    render_chart(summary, figure_path, style)
    if summary_path is not None:
        write_summary(summary, summary_path)

    print("\n" + "=" * 60)
    print("Pipeline complete!")
    print(f"  Figure: {figure_path}")
    print("=" * 60)
    return figure_path


def main() -> None:
    """Entry point: run with defaults, exit non-zero on any pipeline error."""
    try:
        run()
    except PipelineError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
