"""Pydantic models for the on-disk store format and sort methods."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, Field


class SortMethod(str, Enum):
    RECENT = "recent"
    FREQUENT = "frequent"
    FRECENT = "frecent"


class ItemRecord(BaseModel):
    # "path" is the pre-0.4 spelling
    item: str = Field(validation_alias=AliasChoices("item", "path"))
    frecency: float
    last_accessed: float
    num_accesses: int


class StoreRecord(BaseModel):
    """Serialized store. Half-life and reference time live here, not per item."""

    reference_time: float
    half_life: float = Field(gt=0)
    items: list[ItemRecord] = Field(
        default_factory=list, validation_alias=AliasChoices("items", "paths")
    )
