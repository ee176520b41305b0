"""Low-rank approximation of the rating matrix via SVD."""

from __future__ import annotations

import logging

import numpy as np


logger = logging.getLogger(__name__)


def effective_rank(shape: tuple[int, int], rank: int | None) -> int:
    """Number of singular components actually kept for a matrix of `shape`."""
    max_rank = int(min(shape))
    if rank is None:
        return max_rank
    if int(rank) < 1:
        raise ValueError(f"rank must be >= 1 or None, got {rank}")
    return min(int(rank), max_rank)


def predict_low_rank(values: np.ndarray, *, rank: int | None = None) -> np.ndarray:
    """Reconstruct `values` from its top-`rank` singular components.

    Uses the thin LAPACK SVD (`numpy.linalg.svd`), which is deterministic for a
    given input. With `rank=None` every component is kept and the result equals
    `values` up to floating point error. Predictions are not clamped to the
    rating scale.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {values.shape}")

    k = effective_rank(values.shape, rank)
    if k == 0 or not values.any():
        # Empty or all-zero matrix: the reconstruction is all zeros.
        return np.zeros_like(values)

    u, s, vt = np.linalg.svd(values, full_matrices=False)
    predicted = (u[:, :k] * s[:k]) @ vt[:k, :]

    logger.debug(
        "SVD shape=%s rank=%d/%d kept_energy=%.4f",
        values.shape,
        k,
        len(s),
        float((s[:k] ** 2).sum() / (s ** 2).sum()),
    )
    return predicted
