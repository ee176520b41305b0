"""Generate a small reproducible demo dataset (users, movies, ratings)."""

from __future__ import annotations

import argparse
import logging
import uuid
from pathlib import Path

import numpy as np
import pandas as pd

from ..data import MAX_RATING, MIN_RATING, RawRatingsData, save_raw_data, validate_schema
from ..paths import get_repo_root
from ..utils import setup_logging


logger = logging.getLogger(__name__)


DEMO_USERS: list[tuple[str, str]] = [
    ("Alice", "alice@example.com"),
    ("Bob", "bob@example.com"),
    ("Charlie", "charlie@example.com"),
    ("David", "david@example.com"),
    ("Eve", "eve@example.com"),
    ("Frank", "frank@example.com"),
    ("Grace", "grace@example.com"),
    ("Heidi", "heidi@example.com"),
    ("Ivan", "ivan@example.com"),
    ("Judy", "judy@example.com"),
]

DEMO_ITEMS: list[tuple[str, str]] = [
    ("The Matrix", "Sci-Fi"),
    ("Inception", "Sci-Fi"),
    ("Interstellar", "Sci-Fi"),
    ("The Dark Knight", "Action"),
    ("Avengers", "Action"),
    ("Iron Man", "Action"),
    ("Thor", "Fantasy"),
    ("Doctor Strange", "Fantasy"),
    ("Black Panther", "Action"),
    ("Captain America", "Action"),
    ("Guardians of the Galaxy", "Sci-Fi"),
    ("Spider-Man: Homecoming", "Action"),
    ("Shutter Island", "Thriller"),
    ("Memento", "Thriller"),
    ("Dunkirk", "War"),
    ("Tenet", "Sci-Fi"),
    ("The Prestige", "Drama"),
    ("Joker", "Drama"),
    ("Logan", "Action"),
    ("Deadpool", "Comedy"),
]


def _uuid4(rng: np.random.Generator) -> str:
    return str(uuid.UUID(bytes=rng.bytes(16), version=4))


def build_demo_data(*, seed: int = 42, rate_prob: float = 0.8) -> RawRatingsData:
    """Every user rates every movie with probability `rate_prob`, uniformly in 1..5."""
    if not 0.0 <= float(rate_prob) <= 1.0:
        raise ValueError(f"rate_prob must be in [0, 1], got {rate_prob}")

    rng = np.random.default_rng(int(seed))

    users = pd.DataFrame(
        [{"id": _uuid4(rng), "name": name, "email": email} for name, email in DEMO_USERS]
    )
    items = pd.DataFrame(
        [{"id": _uuid4(rng), "title": title, "category": cat} for title, cat in DEMO_ITEMS]
    )

    rows: list[dict[str, object]] = []
    for user_id in users["id"].tolist():
        for item_id in items["id"].tolist():
            if rng.random() < float(rate_prob):
                rows.append(
                    {
                        "userId": user_id,
                        "itemId": item_id,
                        "rating": int(rng.integers(MIN_RATING, MAX_RATING + 1)),
                    }
                )
    ratings = pd.DataFrame(rows, columns=["userId", "itemId", "rating"])

    data = RawRatingsData(users=users, items=items, ratings=ratings)
    validate_schema(data)
    return data


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Write the demo users/items/ratings CSVs.")
    p.add_argument("--out-dir", type=Path, default=Path("data/raw"), help="Output directory for the CSVs")
    p.add_argument("--seed", type=int, default=42, help="Random seed")
    p.add_argument("--rate-prob", type=float, default=0.8, help="Probability that a user rated a movie")
    return p


def main(argv: list[str] | None = None) -> None:
    setup_logging("INFO")
    args = build_arg_parser().parse_args(argv)

    out_dir = Path(args.out_dir)
    if not out_dir.is_absolute():
        out_dir = (get_repo_root() / out_dir).resolve()

    data = build_demo_data(seed=int(args.seed), rate_prob=float(args.rate_prob))
    paths = save_raw_data(data, out_dir)
    logger.info(
        "Wrote demo dataset users=%d items=%d ratings=%d to %s",
        len(data.users),
        len(data.items),
        len(data.ratings),
        out_dir,
    )
    for name, path in sorted(paths.items()):
        logger.info("  %s -> %s", name, path)


if __name__ == "__main__":
    main()
