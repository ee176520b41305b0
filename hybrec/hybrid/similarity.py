"""Item-item cosine similarity over rating-matrix columns."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ItemNotFoundError


# Similarity assigned to any pair involving an item nobody rated (0/0 cosine).
ZERO_VECTOR_SIMILARITY = 0.0


def _cosine_sim_matrix(a: np.ndarray) -> np.ndarray:
    """Cosine similarity between all rows of `a`; zero rows score 0 against everything."""
    a = np.asarray(a, dtype=np.float64)
    norms = np.linalg.norm(a, axis=1, keepdims=True)
    zero = norms[:, 0] == 0.0
    norms[zero] = 1.0
    a_n = a / norms
    sim = a_n @ a_n.T
    sim[zero, :] = ZERO_VECTOR_SIMILARITY
    sim[:, zero] = ZERO_VECTOR_SIMILARITY
    return sim


def item_similarity(values: np.ndarray) -> np.ndarray:
    """Symmetric item x item cosine similarity of the columns of `values`.

    Unrated cells count as zero coordinates. The diagonal is exactly 1, including
    for items nobody rated.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {values.shape}")

    n_items = int(values.shape[1])
    if n_items == 0:
        return np.zeros((0, 0), dtype=np.float64)

    sim = _cosine_sim_matrix(values.T)
    # a + b == b + a in IEEE arithmetic, so this is exactly symmetric.
    sim = (sim + sim.T) / 2.0
    np.clip(sim, -1.0, 1.0, out=sim)
    np.fill_diagonal(sim, 1.0)
    return sim


def most_similar_items(
    sim: np.ndarray,
    item_ids: Sequence[str],
    item_id: str,
    *,
    top_n: int = 10,
) -> list[tuple[str, float]]:
    """Return the `top_n` items most similar to `item_id`, excluding itself.

    Ties keep catalog order.
    """
    if int(top_n) < 1:
        raise ValueError("top_n must be >= 1")

    item_ids = list(item_ids)
    try:
        j = item_ids.index(item_id)
    except ValueError:
        raise ItemNotFoundError(item_id) from None

    row = np.asarray(sim[j], dtype=np.float64)
    order = np.argsort(-row, kind="stable")
    out: list[tuple[str, float]] = []
    for k in order.tolist():
        if k == j:
            continue
        out.append((item_ids[k], float(row[k])))
        if len(out) >= int(top_n):
            break
    return out
