"""
Join household-mode distances onto households and bucket them into tiers.

Three independent lookups against explicit code sets:
- density: HBPPOPDN (persons per sq mile, block group) -> 4 ordered tiers
- income:  HHFAMINC (family income band) -> 3 ordered tiers
- mode:    TRPTRANS (trip transportation mode) -> active/transit, car/truck, other

Households whose density or income code is unknown, refused, or outside every
tier are dropped, not bucketed.
"""

import pandas as pd

# Synthesised TRPTRANS for households with no trips (not a real NHTS code)
NO_TRIP = "no trip"

# Population density (persons per square mile)
DENSITY_UNKNOWN = -9
DENSITY_TIERS = {
    "<1,000": frozenset({50, 300, 750}),
    "1,000-4,999": frozenset({1500, 3000}),
    "5,000-24,999": frozenset({7000, 17000}),
    "25,000+": frozenset({30000}),
}
DENSITY_ORDER = list(DENSITY_TIERS)

# Family income: 01 <$10k ... 05 $35-50k, 06 $50-75k ... 08 $100-125k,
# 09 $125-150k ... 11 $200k+
INCOME_EXCLUDED = frozenset({"-7", "-8", "-9"})  # refused, don't know, not ascertained
INCOME_TIERS = {
    "Under $50k": frozenset({"01", "02", "03", "04", "05"}),
    "$50k-$124k": frozenset({"06", "07", "08"}),
    "$125k+": frozenset({"09", "10", "11"}),
}
INCOME_ORDER = list(INCOME_TIERS)

ACTIVE_TRANSIT = "active/transit"
CAR_TRUCK = "car/truck"
OTHER_MODE = "other"

MODE_TIERS = {
    # walk, bicycle, school bus, public bus, private bus, intercity bus,
    # Amtrak/commuter rail, subway/light rail
    ACTIVE_TRANSIT: frozenset({"01", "02", "10", "11", "13", "14", "15", "16"}),
    # car, SUV, van, pickup, taxi/ride-hail, rental car
    CAR_TRUCK: frozenset({"03", "04", "05", "06", "17", "18"}),
}
MODE_ORDER = [ACTIVE_TRANSIT, CAR_TRUCK, OTHER_MODE]


def classify_density(code: int) -> str | None:
    """Return the density tier for a HBPPOPDN code, or None if unknown."""
    if code == DENSITY_UNKNOWN:
        return None
    for tier, codes in DENSITY_TIERS.items():
        if code in codes:
            return tier
    return None


def classify_income(code: str) -> str | None:
    """Return the income tier for a HHFAMINC code, or None if excluded."""
    if code in INCOME_EXCLUDED:
        return None
    for tier, codes in INCOME_TIERS.items():
        if code in codes:
            return tier
    return None


def classify_mode(code: str) -> str:
    """Return the mode tier for any TRPTRANS code; unlisted codes are "other"."""
    for tier, codes in MODE_TIERS.items():
        if code in codes:
            return tier
    return OTHER_MODE


def join_distances(households: pd.DataFrame, distances: pd.DataFrame) -> pd.DataFrame:
    """
    Left-join household-mode distances onto every household.

    Households without trips keep one row with ``distance = 0`` and
    ``TRPTRANS = NO_TRIP``.
    """
    joined = households.merge(distances, on="HOUSEID", how="left")
    joined["distance"] = joined["distance"].fillna(0.0).astype("float64")
    joined["TRPTRANS"] = joined["TRPTRANS"].fillna(NO_TRIP)

    n_no_trip = (joined["TRPTRANS"] == NO_TRIP).sum()
    print(
        f"  Joined {len(households):,} households -> {len(joined):,} rows "
        f"({n_no_trip:,} with no trips)"
    )
    return joined


def classify_households(joined: pd.DataFrame) -> pd.DataFrame:
    """
    Add density, income and mode tiers and drop rows without a density or
    income tier.

    Also adds ``weighted_distance``: the household-mode distance scaled by the
    household weight, so cell averages are household-weighted.
    """
    df = joined.copy()
    df["density_tier"] = df["HBPPOPDN"].map(classify_density)
    df["income_tier"] = df["HHFAMINC"].map(classify_income)
    df["mode_tier"] = df["TRPTRANS"].map(classify_mode)
    df["weighted_distance"] = df["WTHHFIN"] * df["distance"]

    no_density = df["density_tier"].isna()
    no_income = df["income_tier"].isna()
    keep = ~(no_density | no_income)

    print(
        f"  Excluded {(~keep).sum():,} rows "
        f"(density unknown: {no_density.sum():,}, income unknown: {no_income.sum():,})"
    )
    df = df[keep].reset_index(drop=True)
    print(f"  Classified rows: {len(df):,}")
    return df
