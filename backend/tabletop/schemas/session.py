"""Game session schemas"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from tabletop.core.utils import naive_utc
from tabletop.models.game_session import SessionStatus
from tabletop.models.session_intent import IntentStatus
from tabletop.schemas.common import PatchModel


class SessionCreate(BaseModel):
    table_id: UUID
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=5000)
    scheduled_for: Optional[datetime] = None
    status: SessionStatus = SessionStatus.SCHEDULED

    @field_validator('scheduled_for')
    @classmethod
    def to_naive_utc(cls, v):
        return naive_utc(v)


class SessionUpdate(PatchModel):
    """Session patch; scheduled_for may be cleared with an explicit null"""
    nullable_fields = frozenset({"scheduled_for"})

    title: str = Field(None, min_length=1, max_length=120)
    description: str = Field(None, max_length=5000)
    scheduled_for: Optional[datetime] = None
    status: SessionStatus = None

    @field_validator('scheduled_for')
    @classmethod
    def to_naive_utc(cls, v):
        return naive_utc(v)


class SessionResponse(BaseModel):
    id: UUID
    table_id: UUID
    title: str
    description: str
    scheduled_for: Optional[datetime]
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CheckinEntry(BaseModel):
    """Attendance recorded by the GM for one player when closing a session"""
    user_id: UUID
    attendance: bool
    notes: Optional[str] = Field(None, max_length=2000)


class SessionFinalize(BaseModel):
    checkins: List[CheckinEntry] = Field(default_factory=list)

    @field_validator('checkins')
    @classmethod
    def unique_users(cls, v):
        user_ids = [entry.user_id for entry in v]
        if len(user_ids) != len(set(user_ids)):
            raise ValueError('Duplicate users in checkin list')
        return v


class CheckinResult(BaseModel):
    user_id: UUID
    intent_status: IntentStatus
    attendance: bool
    checkin_id: UUID


class SessionFinalizationResponse(BaseModel):
    session: SessionResponse
    checkins: List[CheckinResult]
