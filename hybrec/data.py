from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

import pandas as pd


@dataclass(frozen=True)
class RawRatingsData:
    users: pd.DataFrame
    items: pd.DataFrame
    ratings: pd.DataFrame


REQUIRED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "users": ("id",),
    "items": ("id", "title"),
    "ratings": ("userId", "itemId", "rating"),
}

MIN_RATING = 1
MAX_RATING = 5


def load_raw_data(raw_dir: Path) -> RawRatingsData:
    """Load the users/items/ratings CSV files from a directory.

    Notes
    -----
    Ids are read as strings: they are opaque keys (UUIDs in the upstream
    database) and must never be reinterpreted as numbers. Row order is kept,
    since the recommender assigns matrix indices in input order.
    """
    raw_dir = Path(raw_dir)
    users = pd.read_csv(raw_dir / "users.csv", dtype={"id": "string"})
    items = pd.read_csv(
        raw_dir / "items.csv",
        dtype={"id": "string", "title": "string"},
        keep_default_na=False,
    )
    ratings = pd.read_csv(
        raw_dir / "ratings.csv",
        dtype={"userId": "string", "itemId": "string", "rating": "int64"},
    )

    data = RawRatingsData(users=users, items=items, ratings=ratings)
    validate_schema(data)
    return data


def validate_schema(data: RawRatingsData) -> None:
    """Validate that all required columns exist and basic constraints hold."""
    for name, cols in REQUIRED_COLUMNS.items():
        df = getattr(data, name)
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ValueError(f"{name}.csv missing columns: {missing}")

    if data.users["id"].isna().any():
        raise ValueError("users.csv has empty id values")
    if data.users["id"].duplicated().any():
        raise ValueError("users.csv has duplicate id values")

    if data.items["id"].isna().any():
        raise ValueError("items.csv has empty id values")
    if data.items["id"].duplicated().any():
        raise ValueError("items.csv has duplicate id values")

    ratings = data.ratings
    if ratings[["userId", "itemId", "rating"]].isna().any().any():
        raise ValueError("ratings.csv has empty userId/itemId/rating values")

    # Zero means "unrated" in the rating matrix, so only 1..5 is representable.
    bad_mask = ~ratings["rating"].between(MIN_RATING, MAX_RATING)
    if bad_mask.any():
        bad_values = sorted(set(ratings.loc[bad_mask, "rating"].tolist()))
        raise ValueError(
            f"ratings.csv has invalid rating values (expected integers {MIN_RATING}..{MAX_RATING}): {bad_values}"
        )

    # Ratings that reference unknown users/items and duplicate (userId, itemId)
    # rows are tolerated: the matrix builder drops the former and lets the last
    # duplicate win.


def save_raw_data(data: RawRatingsData, raw_dir: Path) -> dict[str, str]:
    """Write the three CSV files to `raw_dir` and return their paths."""
    raw_dir = Path(raw_dir)
    raw_dir.mkdir(parents=True, exist_ok=True)

    out: dict[str, str] = {}
    for name in ("users", "items", "ratings"):
        path = raw_dir / f"{name}.csv"
        getattr(data, name).to_csv(path, index=False)
        out[f"{name}_csv"] = str(path)
    return out
