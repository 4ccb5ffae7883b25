"""Shared schema types: batch reorder."""

import uuid

from pydantic import BaseModel, Field, field_validator


class ReorderRequest(BaseModel):
    """Ids in their new display order; each gets ``order = index``."""

    ids: list[uuid.UUID] = Field(..., min_length=1, max_length=1000)

    @field_validator("ids")
    @classmethod
    def reject_duplicates(cls, v: list[uuid.UUID]) -> list[uuid.UUID]:
        if len(set(v)) != len(v):
            raise ValueError("ids must not contain duplicates")
        return v
