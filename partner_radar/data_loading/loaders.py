"""
Data loading functions for the matching engine.

This module loads profile records from CSV or JSON files into Profile
objects. JSON may be a list of records or a ``{id: record}`` mapping,
which is the shape of a realtime-store snapshot. No scoring is done
here - that's handled by the scoring module.
"""

import logging
from pathlib import Path
from typing import List, Optional
import json

import pandas as pd

from ..profiles.schema import Profile, FIELD_ALIASES

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = [
    "id", "name", "study_field", "subjects", "university",
    "faculty", "city", "country", "year_of_study",
]


def load_profiles_frame(filepath: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load raw profile records into a DataFrame.

    Args:
        filepath: Path to a .csv or .json profiles file
        delimiter: Field delimiter for CSV files

    Returns:
        DataFrame with one row per profile and an ``id`` column

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or has no id column
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profiles file not found: {filepath}")

    if path.suffix.lower() == ".json":
        logger.info(f"Loading profiles from {filepath} (json)")
        with open(filepath, "r") as f:
            data = json.load(f)
        if isinstance(data, dict):
            df = pd.DataFrame.from_dict(data, orient="index")
            keys = df.index.astype(str)
            if "id" not in df.columns:
                df.insert(0, "id", keys)
            else:
                # Records without their own id are keyed by the snapshot
                df["id"] = df["id"].where(df["id"].notna(), pd.Series(keys, index=df.index))
            df = df.reset_index(drop=True)
        else:
            df = pd.DataFrame(data or [])
    else:
        logger.info(f"Loading profiles from {filepath} (delimiter: {repr(delimiter)})")
        try:
            df = pd.read_csv(filepath, sep=delimiter, dtype=str)
        except pd.errors.EmptyDataError:
            raise ValueError(f"Profiles file is empty: {filepath}")

    if df.empty:
        raise ValueError(f"Profiles file is empty: {filepath}")

    id_column = next((alias for alias in FIELD_ALIASES["id"] if alias in df.columns), None)
    if id_column is None:
        raise ValueError(f"Profiles file has no id column: {filepath}")
    if id_column != "id":
        df = df.rename(columns={id_column: "id"})

    logger.info(f"Loaded {len(df)} rows with {len(df.columns)} columns")
    return df


def validate_profile_columns(df: pd.DataFrame) -> List[str]:
    """
    Report expected profile columns missing from a DataFrame.

    Camel-case aliases (``studyField``, ``yearOfStudy``) count as present.

    Args:
        df: Profiles DataFrame

    Returns:
        List of missing column names (empty if all present)
    """
    missing = []
    for column in EXPECTED_COLUMNS:
        aliases = FIELD_ALIASES.get(column, (column,))
        if not any(alias in df.columns for alias in aliases):
            missing.append(column)
    return missing


def profiles_from_frame(df: pd.DataFrame) -> List[Profile]:
    """
    Convert a profiles DataFrame to Profile objects, preserving row order.

    Args:
        df: DataFrame with an ``id`` column

    Returns:
        List of Profile

    Raises:
        ValueError: If identifiers are blank or duplicated
    """
    profiles = [Profile.from_dict(record) for record in df.to_dict(orient="records")]

    blank = sum(1 for p in profiles if not p.id)
    if blank:
        raise ValueError(f"{blank} profile(s) have a blank id")

    ids = pd.Series([p.id for p in profiles])
    duplicates = sorted(ids[ids.duplicated()].unique())
    if duplicates:
        raise ValueError(f"Duplicate profile ids: {duplicates}")

    return profiles


def load_profiles(filepath: str, delimiter: str = ",") -> List[Profile]:
    """
    Load profiles from a CSV or JSON file.

    CSV subjects are ``;``-separated; JSON subjects may be lists.

    Args:
        filepath: Path to the profiles file
        delimiter: Field delimiter for CSV files

    Returns:
        List of Profile in file order
    """
    df = load_profiles_frame(filepath, delimiter=delimiter)

    missing = validate_profile_columns(df)
    if missing:
        logger.warning(f"Profiles file is missing columns {missing}; they will score as empty")

    profiles = profiles_from_frame(df)
    logger.info(f"Parsed {len(profiles)} profiles")
    return profiles


def profiles_to_frame(profiles: List[Profile], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Convert profiles to a flat DataFrame (subjects joined with ``;``).

    Args:
        profiles: Profiles to convert
        columns: Optional subset of columns to keep

    Returns:
        DataFrame with one row per profile
    """
    rows = []
    for profile in profiles:
        row = profile.to_dict()
        row["subjects"] = ";".join(profile.subjects)
        rows.append(row)
    df = pd.DataFrame(rows, columns=list(Profile.__dataclass_fields__))
    if columns is not None:
        df = df[columns]
    return df
