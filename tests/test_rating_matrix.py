from __future__ import annotations

import numpy as np
import pytest

from hybrec.hybrid.errors import InvalidRecordError, MatrixTooLargeError
from hybrec.hybrid.matrix import build_rating_matrix
from hybrec.hybrid.schemas import Item, Rating, User


def _users(*ids: str) -> list[User]:
    return [User(id=i) for i in ids]


def _items(*ids: str) -> list[Item]:
    return [Item(id=i, title=i.upper()) for i in ids]


def test_indices_follow_input_order() -> None:
    m = build_rating_matrix(_users("b", "a"), _items("z", "y", "x"), [])

    assert m.user_index == {"b": 0, "a": 1}
    assert m.item_index == {"z": 0, "y": 1, "x": 2}
    assert m.item_ids == ["z", "y", "x"]
    assert m.shape == (2, 3)
    assert not m.values.any()


def test_ratings_are_placed_and_unknown_ids_dropped() -> None:
    ratings = [
        Rating(userId="u1", itemId="i2", rating=4),
        Rating(userId="u2", itemId="i1", rating=2),
        Rating(userId="ghost", itemId="i1", rating=5),
        Rating(userId="u1", itemId="gone", rating=5),
    ]
    m = build_rating_matrix(_users("u1", "u2"), _items("i1", "i2"), ratings)

    np.testing.assert_array_equal(m.values, np.array([[0.0, 4.0], [2.0, 0.0]]))


def test_duplicate_ratings_last_write_wins() -> None:
    ratings = [
        Rating(userId="u1", itemId="i1", rating=1),
        Rating(userId="u1", itemId="i1", rating=5),
    ]
    m = build_rating_matrix(_users("u1"), _items("i1"), ratings)
    assert m.values[0, 0] == 5.0


def test_empty_inputs_give_empty_matrix() -> None:
    m = build_rating_matrix([], [], [])
    assert m.values.shape == (0, 0)
    assert m.user_index == {}

    m = build_rating_matrix(_users("u1"), [], [Rating(userId="u1", itemId="i1", rating=3)])
    assert m.values.shape == (1, 0)


def test_dimension_bounds() -> None:
    with pytest.raises(MatrixTooLargeError, match="max_users"):
        build_rating_matrix(_users("a", "b", "c"), _items("x"), [], max_users=2)
    with pytest.raises(MatrixTooLargeError, match="max_items"):
        build_rating_matrix(_users("a"), _items("x", "y"), [], max_items=1)

    m = build_rating_matrix(_users("a", "b"), _items("x"), [], max_users=2, max_items=1)
    assert m.shape == (2, 1)


def test_repeated_ids_rejected() -> None:
    with pytest.raises(InvalidRecordError, match="duplicate item id 'x' at positions 0 and 2"):
        build_rating_matrix(_users("a"), _items("x", "y", "x"), [])
    with pytest.raises(InvalidRecordError, match="duplicate user id"):
        build_rating_matrix(_users("a", "a"), _items("x"), [])
