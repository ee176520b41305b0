"""Hybrid recommender over a user x item rating matrix.

Core idea:
- Build a dense rating matrix (0 = unrated) from users, items and ratings
- Predict ratings with a truncated SVD reconstruction of that matrix
- Compute item-item cosine similarity from the matrix columns
- Score each unrated item as a blend of the SVD prediction and a
  similarity-weighted average of the user's own ratings, then take the top N
"""

from .config import HybridConfig, load_hybrid_config
from .errors import (
    HybridRecError,
    InvalidRecordError,
    ItemNotFoundError,
    MatrixTooLargeError,
    UserNotFoundError,
)
from .recommender import HybridRecommender, InMemoryRatingsSource, RatingsSource, recommend_hybrid
from .schemas import Item, Rating, Recommendation, User

__all__ = [
    "HybridConfig",
    "HybridRecError",
    "HybridRecommender",
    "InMemoryRatingsSource",
    "InvalidRecordError",
    "Item",
    "ItemNotFoundError",
    "MatrixTooLargeError",
    "Rating",
    "RatingsSource",
    "Recommendation",
    "User",
    "UserNotFoundError",
    "load_hybrid_config",
    "recommend_hybrid",
]
