"""Session attendance intent model"""

import uuid
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Uuid, UniqueConstraint, Index
from tabletop.core.database import Base, status_enum
from tabletop.core.utils import utc_now


class IntentStatus(str, Enum):
    UNSURE = "Unsure"
    CONFIRMED = "Confirmed"
    DECLINED = "Declined"


class SessionIntent(Base):
    """A user's stated plan to attend a session"""

    __tablename__ = "session_intents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    session_id = Column(Uuid, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    intent_status = Column(status_enum(IntentStatus), nullable=False, default=IntentStatus.UNSURE)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint('user_id', 'session_id', name='uq_session_intents_user_session'),
        Index('idx_session_intents_session', 'session_id'),
    )

    def __repr__(self):
        return f"<SessionIntent(id={self.id}, user_id={self.user_id}, session_id={self.session_id}, intent_status='{self.intent_status}')>"
