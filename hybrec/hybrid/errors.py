"""Exceptions raised by the hybrid recommender."""

from __future__ import annotations


class HybridRecError(Exception):
    """Base class for recommender errors."""


class UserNotFoundError(HybridRecError, KeyError):
    """The target user is not part of the supplied user collection."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Unknown userId: {user_id}")
        self.user_id = user_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class ItemNotFoundError(HybridRecError, KeyError):
    """The requested item is not part of the supplied item collection."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Unknown itemId: {item_id}")
        self.item_id = item_id

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidRecordError(HybridRecError, ValueError):
    """A user/item/rating record failed validation at the boundary."""


class MatrixTooLargeError(HybridRecError, ValueError):
    """The rating matrix would exceed the configured dimension bounds."""
