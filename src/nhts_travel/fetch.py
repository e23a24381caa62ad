"""
Download the 2017 NHTS public-use CSV archive and read its tables.

Data source: https://nhts.ornl.gov/downloads
The archive holds one CSV per survey table; this module reads:
- hhpub.csv   (one row per household)
- trippub.csv (one row per trip)
- perpub.csv  (one row per person, carried but unused downstream)

The archive is streamed into a temporary directory that is removed before
``fetch_survey`` returns, whether or not reading succeeds.
"""

import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import NamedTuple

import pandas as pd
import requests
from tqdm import tqdm

from nhts_travel.errors import ArchiveError, NetworkError, ParseError

NHTS_URL = "https://nhts.ornl.gov/assets/2016/download/csv.zip"

HOUSEHOLD_ENTRY = "hhpub.csv"
TRIP_ENTRY = "trippub.csv"
PERSON_ENTRY = "perpub.csv"

# Minimum columns per table and how each is typed
HOUSEHOLD_COLUMNS = {
    "HOUSEID": "id",
    "WTHHFIN": "float",
    "HHFAMINC": "code",
    "HBPPOPDN": "int",
}
TRIP_COLUMNS = {
    "HOUSEID": "id",
    "TRPTRANS": "code",
    "WTTRDFIN": "float",
    "TRPMILES": "float",
}

DOWNLOAD_TIMEOUT = 300


class SurveyTables(NamedTuple):
    """The three tables read from the survey archive."""

    households: pd.DataFrame
    trips: pd.DataFrame
    persons: pd.DataFrame


def download_file(url: str, dest: Path, timeout: int = DOWNLOAD_TIMEOUT) -> Path:
    """
    Stream a file to disk with a progress bar.

    Parameters
    ----------
    url : str
        URL to download.
    dest : Path
        Target file path.
    timeout : int
        Request timeout in seconds.

    Returns
    -------
    Path
        ``dest``, once fully written.

    Raises
    ------
    NetworkError
        On a non-2xx response, a timeout or a connection failure.
    """
    headers = {"User-Agent": "nhts-travel/0.1"}
    try:
        response = requests.get(url, stream=True, timeout=timeout, headers=headers)
        response.raise_for_status()

        total_size = int(response.headers.get("content-length", 0))
        with open(dest, "wb") as f, tqdm(
            total=total_size, unit="B", unit_scale=True, desc=dest.name
        ) as pbar:
            for chunk in response.iter_content(chunk_size=8192):
                f.write(chunk)
                pbar.update(len(chunk))
    except requests.exceptions.RequestException as e:
        raise NetworkError(f"Download of {url} failed: {e}") from e

    return dest


def normalize_code(value: object) -> str:
    """Return a categorical code as a string, zero padding bare digits to two."""
    code = str(value).strip()
    if code.isdigit():
        return code.zfill(2)
    return code


def _coerce_columns(df: pd.DataFrame, columns: dict[str, str], name: str) -> pd.DataFrame:
    """Check required columns are present and give each its declared type."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ParseError(f"{name} is missing required columns: {missing}")

    df = df.copy()
    for col, kind in columns.items():
        try:
            if kind == "id":
                df[col] = df[col].astype(str).str.strip()
            elif kind == "code":
                df[col] = df[col].map(normalize_code)
            elif kind == "int":
                values = pd.to_numeric(df[col], errors="raise")
                if (values % 1 != 0).any():
                    raise ValueError("fractional values present")
                df[col] = values.astype("int64")
            else:
                df[col] = pd.to_numeric(df[col], errors="raise").astype("float64")
        except (ValueError, TypeError) as e:
            raise ParseError(f"{name}: column {col} is not {kind}: {e}") from e
    return df


def read_entry(
    archive: zipfile.ZipFile,
    name: str,
    columns: dict[str, str] | None = None,
) -> pd.DataFrame:
    """
    Read one CSV entry from an open archive.

    Parameters
    ----------
    archive : zipfile.ZipFile
        Open survey archive.
    name : str
        Entry name inside the archive.
    columns : dict[str, str], optional
        Required columns mapped to their type ("id", "code", "int", "float").
        Extra columns in the entry are kept untouched.

    Returns
    -------
    pd.DataFrame
        Parsed table.
    """
    try:
        info = archive.getinfo(name)
    except KeyError as e:
        raise ArchiveError(f"Archive has no entry named {name!r}") from e

    # Codes and IDs are read as text so leading zeros survive
    dtype = {c: str for c, kind in (columns or {}).items() if kind in ("id", "code")}

    try:
        with archive.open(info) as f:
            df = pd.read_csv(f, dtype=dtype, encoding="utf-8-sig", low_memory=False)
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
    ) as e:
        raise ArchiveError(f"Cannot read archive entry {name!r}: {e}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ParseError(f"{name} is not well-formed CSV: {e}") from e

    df.columns = df.columns.str.strip()
    if columns:
        df = _coerce_columns(df, columns, name)

    print(f"  {name}: {len(df):,} rows x {len(df.columns)} columns")
    return df


def load_survey_archive(path: Path) -> SurveyTables:
    """Read the household, trip and person tables from a local archive."""
    try:
        archive = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveError(f"{path} is not a readable zip archive: {e}") from e

    with archive:
        households = read_entry(archive, HOUSEHOLD_ENTRY, HOUSEHOLD_COLUMNS)
        trips = read_entry(archive, TRIP_ENTRY, TRIP_COLUMNS)
        persons = read_entry(archive, PERSON_ENTRY)

    return SurveyTables(households, trips, persons)


def fetch_survey(url: str = NHTS_URL, timeout: int = DOWNLOAD_TIMEOUT) -> SurveyTables:
    """
    Download the survey archive and return its three tables.

    The archive lives in a temporary directory that is deleted on return
    or on error.
    """
    with tempfile.TemporaryDirectory(prefix="nhts-") as tmp:
        archive_path = Path(tmp) / "nhts_csv.zip"
        print(f"  Downloading {url}")
        download_file(url, archive_path, timeout=timeout)
        return load_survey_archive(archive_path)
