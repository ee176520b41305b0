"""hybrec: hybrid SVD + item-similarity recommendations for explicit ratings.

The main user-facing entry points are:
    recommend_hybrid(user_id, users, items, ratings, top_n)
    HybridRecommender(source).recommend(user_id)
    HybridRecommender(source).similar_items(item_id)
"""

from .hybrid import HybridRecommender, UserNotFoundError, recommend_hybrid

__all__ = [
    "HybridRecommender",
    "UserNotFoundError",
    "recommend_hybrid",
]
