"""Hybrid scoring (SVD prediction + item neighbourhood) and top-N ranking."""

from __future__ import annotations

import numpy as np


DEFAULT_BASE_WEIGHT = 0.7
DEFAULT_NEIGHBOR_WEIGHT = 0.3


def neighborhood_scores(user_row: np.ndarray, sim: np.ndarray) -> np.ndarray | None:
    """Average of `sim[j, k] * rating[k]` over the items `k` the user rated.

    Returns one value per item column, or None if the user rated nothing.
    """
    rated = user_row > 0
    n_rated = int(rated.sum())
    if n_rated == 0:
        return None
    return (sim[:, rated] @ user_row[rated]) / float(n_rated)


def score_user(
    user_row: np.ndarray,
    predicted_row: np.ndarray,
    sim: np.ndarray,
    *,
    base_weight: float = DEFAULT_BASE_WEIGHT,
    neighbor_weight: float = DEFAULT_NEIGHBOR_WEIGHT,
) -> list[tuple[int, float]]:
    """Score every item the user has not rated, in column order.

    Scoring:
    - base: the low-rank prediction `predicted_row[j]`
    - neighbourhood: similarity-weighted average of the user's own ratings
    - final: `base_weight * base + neighbor_weight * neighbourhood`, or just
      `base` when the user has no ratings at all
    """
    user_row = np.asarray(user_row, dtype=np.float64)
    predicted_row = np.asarray(predicted_row, dtype=np.float64)

    neigh = neighborhood_scores(user_row, sim)
    if neigh is None:
        scores = predicted_row
    else:
        scores = float(base_weight) * predicted_row + float(neighbor_weight) * neigh

    unrated = np.flatnonzero(user_row == 0)
    return [(int(j), float(scores[j])) for j in unrated.tolist()]


def rank_top_n(scored: list[tuple[int, float]], top_n: int) -> list[tuple[int, float]]:
    """Sort by descending score (stable, so ties keep input order) and truncate."""
    if int(top_n) < 1:
        raise ValueError("top_n must be >= 1")
    ranked = sorted(scored, key=lambda x: x[1], reverse=True)
    return ranked[: int(top_n)]
