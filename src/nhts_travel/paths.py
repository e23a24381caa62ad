"""Centralized path configuration for the nhts-travel project."""

from pathlib import Path

# Project root (source code repository)
PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

# Rendered charts
FIGURE_DIR = PROJECT_DIR / "figures"

# Summary tables written alongside the charts
RESULTS_DIR = PROJECT_DIR / "results"
