from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from hybrec.data import RawRatingsData, load_raw_data, save_raw_data, validate_schema
from hybrec.paths import ProjectPaths
from hybrec.store.catalog import ItemCatalog, normalize_title


def _write(raw_dir: Path, users: str, items: str, ratings: str) -> None:
    raw_dir.mkdir(parents=True, exist_ok=True)
    (raw_dir / "users.csv").write_text(users)
    (raw_dir / "items.csv").write_text(items)
    (raw_dir / "ratings.csv").write_text(ratings)


def test_load_raw_data_keeps_ids_as_strings_and_order(tmp_path: Path) -> None:
    _write(
        tmp_path,
        "id,name\n002,Bob\n001,Alice\n",
        "id,title,category\n10,The Matrix,Sci-Fi\n9,Memento,Thriller\n",
        "userId,itemId,rating\n001,10,5\n002,9,3\n002,404,4\n",
    )
    data = load_raw_data(tmp_path)

    assert data.users["id"].tolist() == ["002", "001"]
    assert data.items["id"].tolist() == ["10", "9"]
    # Dangling references are allowed at load time.
    assert len(data.ratings) == 3


def test_validate_schema_rejects_bad_ratings() -> None:
    data = RawRatingsData(
        users=pd.DataFrame({"id": ["u1"]}),
        items=pd.DataFrame({"id": ["i1"], "title": ["A"]}),
        ratings=pd.DataFrame({"userId": ["u1"], "itemId": ["i1"], "rating": [0]}),
    )
    with pytest.raises(ValueError, match="invalid rating values"):
        validate_schema(data)


def test_validate_schema_rejects_duplicates_and_missing_columns() -> None:
    ratings = pd.DataFrame({"userId": ["u1"], "itemId": ["i1"], "rating": [4]})
    with pytest.raises(ValueError, match="duplicate"):
        validate_schema(
            RawRatingsData(
                users=pd.DataFrame({"id": ["u1", "u1"]}),
                items=pd.DataFrame({"id": ["i1"], "title": ["A"]}),
                ratings=ratings,
            )
        )
    with pytest.raises(ValueError, match="missing columns"):
        validate_schema(
            RawRatingsData(
                users=pd.DataFrame({"id": ["u1"]}),
                items=pd.DataFrame({"id": ["i1"]}),
                ratings=ratings,
            )
        )


def test_save_and_reload(tmp_path: Path) -> None:
    data = RawRatingsData(
        users=pd.DataFrame({"id": ["u1", "u2"]}),
        items=pd.DataFrame({"id": ["i1"], "title": ["Tenet"]}),
        ratings=pd.DataFrame({"userId": ["u2"], "itemId": ["i1"], "rating": [2]}),
    )
    paths = save_raw_data(data, tmp_path / "raw")
    assert set(paths) == {"users_csv", "items_csv", "ratings_csv"}

    loaded = load_raw_data(tmp_path / "raw")
    assert loaded.ratings["rating"].tolist() == [2]


def test_normalize_title() -> None:
    assert normalize_title("  Spider-Man: Homecoming (2017) ") == "spider man homecoming"
    assert normalize_title(None) == ""  # type: ignore[arg-type]


def test_catalog_lookup_and_resolution() -> None:
    items = pd.DataFrame(
        {
            "id": ["a", "b", "c"],
            "title": ["The Matrix", "The Prestige", "Memento"],
            "category": ["Sci-Fi", "Drama", None],
        }
    )
    catalog = ItemCatalog.from_frame(items)

    assert catalog.has_item("b")
    assert not catalog.has_item("z")
    assert catalog.get_display_fields("a") == {"itemId": "a", "title": "The Matrix", "category": "Sci-Fi"}
    assert catalog.get_display_fields("c")["category"] is None

    assert catalog.resolve_title_to_item_id("the matrix") == ("a", 1.0)
    item_id, score = catalog.resolve_title_to_item_id("The Prestig")
    assert item_id == "b"
    assert 0.85 <= score < 1.0
    assert catalog.resolve_title_to_item_id("Completely unrelated")[0] is None

    hits = catalog.search_titles("memento", limit=2)
    assert hits[0]["itemId"] == "c"
    assert len(hits) <= 2

    with pytest.raises(KeyError):
        catalog.get_row("z")


def test_project_paths_resolve_relative_raw_dir(tmp_path: Path) -> None:
    assert ProjectPaths.from_repo_root(tmp_path).raw_dir == (tmp_path / "data" / "raw").resolve()
    assert ProjectPaths.from_repo_root(tmp_path, raw_dir=tmp_path / "x").raw_dir == (tmp_path / "x").resolve()
