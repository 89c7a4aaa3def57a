"""Game system schemas"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from uuid import UUID

from tabletop.schemas.common import PatchModel


def _clean_name(v):
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be blank")
    return v


class GameSystemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)


class GameSystemUpdate(PatchModel):
    name: str = Field(None, min_length=1, max_length=80)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)


class GameSystemResponse(BaseModel):
    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
