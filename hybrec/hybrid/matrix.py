"""User x item rating matrix construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import InvalidRecordError, MatrixTooLargeError
from .schemas import Item, Rating, User


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingMatrix:
    """Dense rating matrix plus the id -> index maps used to build it.

    `values[u, i]` holds the rating of user row `u` for item column `i`;
    0.0 means "unrated".
    """

    values: np.ndarray
    user_index: dict[str, int]
    item_index: dict[str, int]
    item_ids: list[str]

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.values.shape[0]), int(self.values.shape[1]))

    def user_row(self, user_idx: int) -> np.ndarray:
        return self.values[int(user_idx)]


def check_dimensions(n_users: int, n_items: int, *, max_users: int | None, max_items: int | None) -> None:
    """Raise MatrixTooLargeError if the matrix would exceed the configured bounds."""
    if max_users is not None and n_users > int(max_users):
        raise MatrixTooLargeError(f"{n_users} users exceeds max_users={max_users}")
    if max_items is not None and n_items > int(max_items):
        raise MatrixTooLargeError(f"{n_items} items exceeds max_items={max_items}")


def _unique_index(ids: list[str], kind: str) -> dict[str, int]:
    index: dict[str, int] = {}
    for pos, rid in enumerate(ids):
        if rid in index:
            raise InvalidRecordError(f"duplicate {kind} id {rid!r} at positions {index[rid]} and {pos}")
        index[rid] = pos
    return index


def build_rating_matrix(
    users: Sequence[User],
    items: Sequence[Item],
    ratings: Sequence[Rating],
    *,
    max_users: int | None = None,
    max_items: int | None = None,
) -> RatingMatrix:
    """Assemble the rating matrix with rows/columns in input order.

    Repeated user or item ids raise InvalidRecordError. Ratings whose user or
    item is not in `users`/`items` are dropped.
    For duplicate (user, item) pairs the last rating wins.
    """
    check_dimensions(len(users), len(items), max_users=max_users, max_items=max_items)

    user_index = _unique_index([u.id for u in users], "user")
    item_index = _unique_index([it.id for it in items], "item")

    values = np.zeros((len(users), len(items)), dtype=np.float64)
    dropped = 0
    for r in ratings:
        ui = user_index.get(r.userId)
        ii = item_index.get(r.itemId)
        if ui is None or ii is None:
            dropped += 1
            continue
        values[ui, ii] = float(r.rating)

    if dropped:
        logger.debug("Dropped %d ratings referencing unknown users/items", dropped)

    return RatingMatrix(
        values=values,
        user_index=user_index,
        item_index=item_index,
        item_ids=[it.id for it in items],
    )
