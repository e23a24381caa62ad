import pandas as pd
import pytest

from nhts_travel.aggregate import household_mode_distance
from nhts_travel.classify import (
    ACTIVE_TRANSIT,
    CAR_TRUCK,
    OTHER_MODE,
    classify_households,
    join_distances,
)
from nhts_travel.errors import DivisionError
from nhts_travel.summarize import summarize_cells, write_summary


def _summarize(households, trips):
    joined = join_distances(households, household_mode_distance(trips))
    return summarize_cells(classify_households(joined))


def _household(houseid, weight, income, density):
    return {"HOUSEID": houseid, "WTHHFIN": weight, "HHFAMINC": income, "HBPPOPDN": density}


def _trip(houseid, mode, weight, miles):
    return {"HOUSEID": houseid, "TRPTRANS": mode, "WTTRDFIN": weight, "TRPMILES": miles}


def test_walk_and_car_household_scenario():
    households = pd.DataFrame([_household("H", 2.0, "06", 50)])
    trips = pd.DataFrame([_trip("H", "01", 1.0, 10.0), _trip("H", "03", 1.0, 20.0)])

    summary = _summarize(households, trips)

    assert len(summary) == 2
    walk, car = summary.to_dict("records")
    assert (walk["density_tier"], walk["income_tier"], walk["mode_tier"]) == (
        "<1,000", "$50k-$124k", ACTIVE_TRANSIT,
    )
    assert (car["density_tier"], car["income_tier"], car["mode_tier"]) == (
        "<1,000", "$50k-$124k", CAR_TRUCK,
    )
    assert walk["households"] == pytest.approx(2.0)
    assert car["households"] == pytest.approx(2.0)
    assert walk["total_distance"] == pytest.approx(20.0)
    assert car["total_distance"] == pytest.approx(40.0)
    assert walk["avg_distance"] == pytest.approx(10.0)
    assert car["avg_distance"] == pytest.approx(20.0)


def test_unknown_income_household_is_absent():
    households = pd.DataFrame([
        _household("KEEP", 1.0, "03", 3000),
        _household("DROP", 50.0, "-9", 3000),
    ])
    trips = pd.DataFrame([
        _trip("KEEP", "03", 1.0, 5.0),
        _trip("DROP", "03", 1.0, 500.0),
        _trip("DROP", "01", 1.0, 500.0),
    ])

    summary = _summarize(households, trips)

    assert len(summary) == 1
    row = summary.iloc[0]
    assert row["households"] == pytest.approx(1.0)
    assert row["total_distance"] == pytest.approx(5.0)


def test_other_mode_cells_are_dropped():
    households = pd.DataFrame([
        _household("A", 1.0, "09", 30000),
        _household("B", 1.0, "09", 30000),
    ])
    trips = pd.DataFrame([_trip("A", "97", 1.0, 3.0)])

    summary = _summarize(households, trips)

    assert summary.empty
    assert OTHER_MODE not in set(summary["mode_tier"].astype(str))


def test_invariant_avg_is_total_over_households():
    households = pd.DataFrame([
        _household("A", 1.5, "01", 50),
        _household("B", 2.5, "02", 300),
        _household("C", 4.0, "07", 17000),
        _household("D", 0.5, "11", 1500),
    ])
    trips = pd.DataFrame([
        _trip("A", "01", 2.0, 1.5),
        _trip("B", "04", 1.0, 12.0),
        _trip("B", "02", 3.0, 2.0),
        _trip("C", "16", 1.0, 7.0),
        _trip("D", "18", 1.0, 30.0),
    ])

    summary = _summarize(households, trips)

    assert (summary["households"] > 0).all()
    expected = summary["total_distance"] / summary["households"]
    pd.testing.assert_series_equal(summary["avg_distance"], expected, check_names=False)


def test_output_order_is_deterministic():
    households = pd.DataFrame([
        _household("A", 1.0, "11", 30000),
        _household("B", 1.0, "01", 50),
        _household("C", 1.0, "06", 7000),
    ])
    trips = pd.DataFrame([
        _trip("A", "03", 1.0, 1.0),
        _trip("A", "01", 1.0, 1.0),
        _trip("B", "03", 1.0, 1.0),
        _trip("C", "11", 1.0, 1.0),
    ])

    summary = _summarize(households, trips)
    shuffled = _summarize(households.iloc[::-1], trips.iloc[::-1])

    pd.testing.assert_frame_equal(summary, shuffled)
    assert list(summary["density_tier"].astype(str)) == [
        "<1,000", "5,000-24,999", "25,000+", "25,000+",
    ]
    assert list(summary["mode_tier"].astype(str))[-2:] == [ACTIVE_TRANSIT, CAR_TRUCK]


def test_zero_weight_cell_raises():
    households = pd.DataFrame([_household("Z", 0.0, "06", 50)])
    trips = pd.DataFrame([_trip("Z", "03", 1.0, 10.0)])

    with pytest.raises(DivisionError):
        _summarize(households, trips)


def test_zero_weight_other_cell_is_not_an_error():
    households = pd.DataFrame([
        _household("Z", 0.0, "06", 50),
        _household("A", 1.0, "06", 50),
    ])
    trips = pd.DataFrame([_trip("A", "03", 1.0, 10.0)])

    summary = _summarize(households, trips)
    assert len(summary) == 1


def test_write_summary(tmp_path):
    households = pd.DataFrame([_household("H", 2.0, "06", 50)])
    trips = pd.DataFrame([_trip("H", "01", 1.0, 10.0)])
    summary = _summarize(households, trips)

    path = write_summary(summary, tmp_path / "results" / "summary.csv")

    saved = pd.read_csv(path)
    assert list(saved.columns) == [
        "density_tier", "income_tier", "mode_tier",
        "households", "total_distance", "avg_distance",
    ]
    assert saved.loc[0, "avg_distance"] == pytest.approx(10.0)
