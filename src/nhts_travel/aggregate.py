"""Per-household travel distance by transportation mode."""

import pandas as pd

KEY_COLUMNS = ["HOUSEID", "TRPTRANS"]


def household_mode_distance(trips: pd.DataFrame) -> pd.DataFrame:
    """
    Sum weighted trip distance for each (household, mode) pair.

    Each trip contributes ``WTTRDFIN * TRPMILES``. The trip weight is an
    expansion factor and is not normalised; trips with zero or negative
    weight are kept.

    Parameters
    ----------
    trips : pd.DataFrame
        Trip table with HOUSEID, TRPTRANS, WTTRDFIN and TRPMILES.

    Returns
    -------
    pd.DataFrame
        One row per observed pair: HOUSEID, TRPTRANS, distance. Sorted by
        key so that input row order does not affect the result.
    """
    weighted = trips[KEY_COLUMNS].copy()
    weighted["distance"] = trips["WTTRDFIN"] * trips["TRPMILES"]

    result = (
        weighted.groupby(KEY_COLUMNS, as_index=False, sort=True)["distance"]
        .sum()
        .reset_index(drop=True)
    )
    result["distance"] = result["distance"].astype("float64")

    print(
        f"  Aggregated {len(trips):,} trips into {len(result):,} household-mode pairs"
    )
    return result
