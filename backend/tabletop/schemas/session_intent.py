"""Session intent schemas"""

from pydantic import BaseModel
from datetime import datetime
from uuid import UUID

from tabletop.models.session_intent import IntentStatus


class SessionIntentSet(BaseModel):
    intent_status: IntentStatus = IntentStatus.UNSURE


class SessionIntentResponse(BaseModel):
    id: UUID
    user_id: UUID
    session_id: UUID
    intent_status: IntentStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
