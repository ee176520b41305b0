"""Item catalog lookup and title-resolution utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Any

import pandas as pd


_TITLE_YEAR_SUFFIX_RE = re.compile(r"\(\d{4}\)\s*$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_title(text: str) -> str:
    """Normalize title-ish text for matching.

    - Lowercase
    - Remove trailing "(YYYY)"
    - Remove punctuation (keep a-z, 0-9)
    - Collapse whitespace
    """
    text = "" if text is None else str(text)
    text = text.strip().lower()
    text = _TITLE_YEAR_SUFFIX_RE.sub("", text).strip()
    text = _NON_ALNUM_RE.sub(" ", text)
    text = _MULTISPACE_RE.sub(" ", text).strip()
    return text


@dataclass(frozen=True)
class ItemCatalog:
    """In-memory view of the item table with id and title lookup maps."""

    df: pd.DataFrame
    item_id_to_row: dict[str, int]
    norm_title_to_item_ids: dict[str, list[str]]

    @classmethod
    def from_frame(cls, items: pd.DataFrame) -> "ItemCatalog":
        """Index an items frame with at least `id` and `title` columns."""
        for col in ("id", "title"):
            if col not in items.columns:
                raise ValueError(f"items frame missing required column: {col!r}")

        df = items.reset_index(drop=True).copy()
        df["id"] = df["id"].astype("string")
        df["title"] = df["title"].astype("string").fillna("")

        item_ids = [str(x) for x in df["id"].tolist()]
        item_id_to_row = {iid: i for i, iid in enumerate(item_ids)}

        norm_title_to_item_ids: dict[str, list[str]] = {}
        for iid, title in zip(item_ids, df["title"].tolist()):
            key = normalize_title(str(title))
            if not key:
                continue
            norm_title_to_item_ids.setdefault(key, []).append(iid)

        return cls(df=df, item_id_to_row=item_id_to_row, norm_title_to_item_ids=norm_title_to_item_ids)

    def has_item(self, item_id: str) -> bool:
        return str(item_id) in self.item_id_to_row

    def get_row(self, item_id: str) -> pd.Series:
        item_id = str(item_id)
        if item_id not in self.item_id_to_row:
            raise KeyError(f"itemId not found: {item_id}")
        return self.df.iloc[int(self.item_id_to_row[item_id])]

    def get_display_fields(self, item_id: str) -> dict[str, Any]:
        """Return user-facing display fields for an item."""
        row = self.get_row(item_id)
        out: dict[str, Any] = {"itemId": str(row["id"]), "title": str(row["title"])}
        if "category" in row.index:
            cat = row["category"]
            out["category"] = None if pd.isna(cat) else str(cat)
        return out

    def search_titles(self, query: str, *, limit: int = 10) -> list[dict[str, Any]]:
        """Return the best fuzzy title matches for `query`."""
        query_norm = normalize_title(query)
        if not query_norm:
            return []

        scored: list[tuple[str, float]] = []
        for t in self.norm_title_to_item_ids:
            score = SequenceMatcher(None, query_norm, t).ratio()
            if score <= 0.0:
                continue
            scored.append((t, float(score)))

        scored.sort(key=lambda x: x[1], reverse=True)
        out: list[dict[str, Any]] = []
        for title_norm, score in scored[: max(1, int(limit))]:
            for iid in self.norm_title_to_item_ids.get(title_norm, []):
                item = self.get_display_fields(iid)
                item["score"] = float(score)
                out.append(item)
                if len(out) >= int(limit):
                    return out
        return out

    def resolve_title_to_item_id(self, query: str, *, min_similarity: float = 0.85) -> tuple[str | None, float]:
        """Resolve a free-text title to an itemId via exact, then fuzzy, match.

        Returns (itemId or None, similarity score). Duplicate titles resolve to
        the first item in catalog order.
        """
        query_norm = normalize_title(query)
        if not query_norm:
            return None, 0.0

        exact = self.norm_title_to_item_ids.get(query_norm)
        if exact:
            return exact[0], 1.0

        best_title: str | None = None
        best_score = 0.0
        for cand in self.norm_title_to_item_ids:
            s = SequenceMatcher(None, query_norm, cand).ratio()
            if s > best_score:
                best_title = cand
                best_score = float(s)

        if best_title is None or best_score < float(min_similarity):
            return None, float(best_score)

        return self.norm_title_to_item_ids[best_title][0], float(best_score)
