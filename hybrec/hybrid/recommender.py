"""Hybrid recommender: low-rank SVD prediction blended with item-item similarity.

Every call rebuilds the rating matrix, its low-rank reconstruction and the item
similarity matrix from the supplied users/items/ratings. Nothing is cached, so
concurrent calls never share mutable state.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

import numpy as np
import pandas as pd

from .config import HybridConfig
from .errors import UserNotFoundError
from .factorization import effective_rank, predict_low_rank
from .matrix import RatingMatrix, build_rating_matrix
from .schemas import Item, Rating, Recommendation, User, coerce_items, coerce_ratings, coerce_users
from .scoring import rank_top_n, score_user
from .similarity import item_similarity, most_similar_items


logger = logging.getLogger(__name__)


class RatingsSource(Protocol):
    """Supplies a snapshot of the three input collections."""

    def users(self) -> Sequence[Any]: ...

    def items(self) -> Sequence[Any]: ...

    def ratings(self) -> Sequence[Any]: ...


@dataclass(frozen=True)
class InMemoryRatingsSource:
    """Immutable in-memory snapshot of users, items and ratings."""

    user_records: tuple[User, ...]
    item_records: tuple[Item, ...]
    rating_records: tuple[Rating, ...]

    @classmethod
    def from_records(
        cls,
        users: Iterable[Any],
        items: Iterable[Any],
        ratings: Iterable[Any],
    ) -> "InMemoryRatingsSource":
        return cls(
            user_records=tuple(coerce_users(users)),
            item_records=tuple(coerce_items(items)),
            rating_records=tuple(coerce_ratings(ratings)),
        )

    @classmethod
    def from_frames(
        cls,
        users: pd.DataFrame,
        items: pd.DataFrame,
        ratings: pd.DataFrame,
    ) -> "InMemoryRatingsSource":
        """Build from the frames returned by `hybrec.data.load_raw_data`."""
        item_cols = ["id", "title"] if "title" in items.columns else ["id"]
        return cls.from_records(
            users[["id"]].astype({"id": str}).to_dict(orient="records"),
            items[item_cols].astype({c: str for c in item_cols}).to_dict(orient="records"),
            ratings[["userId", "itemId", "rating"]]
            .astype({"userId": str, "itemId": str, "rating": int})
            .to_dict(orient="records"),
        )

    def users(self) -> Sequence[User]:
        return self.user_records

    def items(self) -> Sequence[Item]:
        return self.item_records

    def ratings(self) -> Sequence[Rating]:
        return self.rating_records


def _factorize_and_compare(matrix: RatingMatrix, cfg: HybridConfig) -> tuple[np.ndarray, np.ndarray]:
    """Compute the predicted matrix and the item similarity matrix.

    The two only read `matrix.values`, so they can run on separate threads.
    """
    if cfg.parallel and matrix.values.size > 0:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="hybrec") as pool:
            fut_pred = pool.submit(predict_low_rank, matrix.values, rank=cfg.svd_rank)
            fut_sim = pool.submit(item_similarity, matrix.values)
            return fut_pred.result(), fut_sim.result()
    return predict_low_rank(matrix.values, rank=cfg.svd_rank), item_similarity(matrix.values)


def recommend_hybrid(
    user_id: str,
    users: Iterable[Any],
    items: Iterable[Any],
    ratings: Iterable[Any],
    top_n: int = 10,
    *,
    config: HybridConfig | None = None,
) -> list[Recommendation]:
    """Recommend up to `top_n` items the user has not rated, best first.

    Raises UserNotFoundError if `user_id` is not among `users`. Records may be
    pydantic models, dicts, or any objects exposing the expected attributes;
    they are validated before the matrix is built.
    """
    cfg = config or HybridConfig()
    if int(top_n) < 1:
        raise ValueError("top_n must be >= 1")

    users_v = coerce_users(users)
    items_v = coerce_items(items)
    ratings_v = coerce_ratings(ratings)

    t0 = time.perf_counter()
    matrix = build_rating_matrix(
        users_v,
        items_v,
        ratings_v,
        max_users=cfg.max_users,
        max_items=cfg.max_items,
    )

    uid = str(user_id)
    uidx = matrix.user_index.get(uid)
    if uidx is None:
        raise UserNotFoundError(uid)

    predicted, sim = _factorize_and_compare(matrix, cfg)

    scored = score_user(
        matrix.user_row(uidx),
        predicted[uidx],
        sim,
        base_weight=cfg.base_weight,
        neighbor_weight=cfg.neighbor_weight,
    )
    ranked = rank_top_n(scored, int(top_n))

    logger.debug(
        "Recommended user=%s shape=%s rank=%d candidates=%d returned=%d in %.1fms",
        uid,
        matrix.shape,
        effective_rank(matrix.shape, cfg.svd_rank),
        len(scored),
        len(ranked),
        (time.perf_counter() - t0) * 1000.0,
    )
    return [Recommendation(itemId=matrix.item_ids[j], score=score) for j, score in ranked]


class HybridRecommender:
    """Recommender bound to an injected ratings source.

    A fresh snapshot is read from `source` on every call, so updates made by the
    caller are picked up without any invalidation step.
    """

    def __init__(self, source: RatingsSource, *, config: HybridConfig | None = None) -> None:
        self.source = source
        self.config = config or HybridConfig()

    def has_user(self, user_id: str) -> bool:
        uid = str(user_id)
        return any(u.id == uid for u in coerce_users(self.source.users()))

    def recommend(self, user_id: str, *, top_n: int | None = None) -> list[Recommendation]:
        """Recommend items for `user_id`; `top_n` defaults to `config.top_n`."""
        return recommend_hybrid(
            user_id,
            self.source.users(),
            self.source.items(),
            self.source.ratings(),
            top_n=int(self.config.top_n if top_n is None else top_n),
            config=self.config,
        )

    def similar_items(self, item_id: str, *, top_n: int | None = None) -> list[Recommendation]:
        """Items whose rating columns are most cosine-similar to `item_id`'s."""
        matrix = build_rating_matrix(
            coerce_users(self.source.users()),
            coerce_items(self.source.items()),
            coerce_ratings(self.source.ratings()),
            max_users=self.config.max_users,
            max_items=self.config.max_items,
        )
        sim = item_similarity(matrix.values)
        n = int(self.config.top_n if top_n is None else top_n)
        pairs = most_similar_items(sim, matrix.item_ids, str(item_id), top_n=n)
        return [Recommendation(itemId=iid, score=score) for iid, score in pairs]
