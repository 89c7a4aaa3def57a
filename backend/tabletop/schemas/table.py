"""Table schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from tabletop.models.table import TableStatus
from tabletop.schemas.common import PatchModel


class TableCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=5000)
    player_slots: int = Field(4, ge=1, le=64)
    game_system_id: Optional[UUID] = None


class TableUpdate(PatchModel):
    """Table patch; explicit null is only accepted for nullable fields"""
    nullable_fields = frozenset({"game_system_id"})

    title: str = Field(None, min_length=1, max_length=120)
    description: str = Field(None, max_length=5000)
    player_slots: int = Field(None, ge=1, le=64)
    game_system_id: Optional[UUID] = None
    status: TableStatus = None


class TableResponse(BaseModel):
    id: UUID
    gm_id: UUID
    title: str
    description: str
    player_slots: int
    game_system_id: Optional[UUID]
    status: TableStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
