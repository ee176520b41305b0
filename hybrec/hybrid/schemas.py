"""Pydantic value types for the records the recommender consumes and returns."""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidRecordError


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True, extra="ignore")


class User(_Record):
    """A user; only the id is used by the recommender."""

    id: str = Field(..., min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class Item(_Record):
    """A catalog item. `title` is for display only."""

    id: str = Field(..., min_length=1)
    title: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class Rating(_Record):
    """An explicit rating. 0 is reserved for "unrated" in the matrix."""

    userId: str = Field(..., min_length=1)
    itemId: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)

    @field_validator("userId", "itemId", mode="before")
    @classmethod
    def _ids_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class Recommendation(_Record):
    """A single ranked recommendation."""

    itemId: str
    score: float


RecordT = TypeVar("RecordT", bound=_Record)


def _coerce(model: type[RecordT], records: Iterable[Any], kind: str) -> list[RecordT]:
    out: list[RecordT] = []
    for pos, rec in enumerate(records):
        if isinstance(rec, model):
            out.append(rec)
            continue
        try:
            if isinstance(rec, dict):
                out.append(model.model_validate(rec))
            else:
                out.append(model.model_validate(rec, from_attributes=True))
        except ValidationError as exc:
            raise InvalidRecordError(f"invalid {kind} record at position {pos}: {exc}") from exc
    return out


def coerce_users(records: Iterable[Any]) -> list[User]:
    """Validate user records (models, dicts or objects with an `id` attribute)."""
    return _coerce(User, records, "user")


def coerce_items(records: Iterable[Any]) -> list[Item]:
    """Validate item records (models, dicts or objects with `id`/`title`)."""
    return _coerce(Item, records, "item")


def coerce_ratings(records: Iterable[Any]) -> list[Rating]:
    """Validate rating records (models, dicts or objects with `userId`/`itemId`/`rating`)."""
    return _coerce(Rating, records, "rating")
