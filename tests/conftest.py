import zipfile

import matplotlib
import pandas as pd
import pytest

matplotlib.use("Agg")

HOUSEHOLD_CSV = """HOUSEID,WTHHFIN,HHFAMINC,HBPPOPDN,HHSIZE
30000007,2.0,06,50,3
30000008,1.5,10,30000,1
30000012,4.0,-9,750,2
30000019,3.0,02,-9,4
30000029,5.0,03,7000,2
"""

TRIP_CSV = """HOUSEID,PERSONID,TRPTRANS,WTTRDFIN,TRPMILES
30000007,01,01,1.0,10
30000007,01,03,1.0,20
30000008,01,16,2.0,5.5
30000008,01,97,1.0,3
30000012,01,03,1.0,40
30000019,02,04,1.0,8
"""

PERSON_CSV = """HOUSEID,PERSONID,R_AGE
30000007,01,45
30000008,01,29
"""


def write_archive(path, entries):
    """Write a zip archive holding the given {name: text} entries."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, text in entries.items():
            zf.writestr(name, text)
    return path


@pytest.fixture
def survey_entries():
    return {
        "hhpub.csv": HOUSEHOLD_CSV,
        "trippub.csv": TRIP_CSV,
        "perpub.csv": PERSON_CSV,
    }


@pytest.fixture
def survey_archive(tmp_path, survey_entries):
    return write_archive(tmp_path / "csv.zip", survey_entries)


@pytest.fixture
def households():
    return pd.DataFrame({
        "HOUSEID": ["H1", "H2", "H3"],
        "WTHHFIN": [2.0, 1.0, 3.0],
        "HHFAMINC": ["06", "-9", "11"],
        "HBPPOPDN": [50, 3000, 30000],
    })


@pytest.fixture
def trips():
    return pd.DataFrame({
        "HOUSEID": ["H1", "H1", "H2", "H1"],
        "TRPTRANS": ["01", "03", "03", "01"],
        "WTTRDFIN": [1.0, 1.0, 2.0, 0.5],
        "TRPMILES": [10.0, 20.0, 4.0, 2.0],
    })
