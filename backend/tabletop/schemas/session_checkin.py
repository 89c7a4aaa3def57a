"""Session checkin schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from tabletop.schemas.common import PatchModel


class SessionCheckinCreate(BaseModel):
    session_intent_id: UUID
    attendance: bool
    notes: Optional[str] = Field(None, max_length=2000)


class SessionCheckinUpdate(PatchModel):
    """Checkin patch; notes may be cleared with an explicit null"""
    nullable_fields = frozenset({"notes"})

    attendance: bool = None
    notes: Optional[str] = Field(None, max_length=2000)


class SessionCheckinResponse(BaseModel):
    id: UUID
    session_intent_id: UUID
    attendance: bool
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
