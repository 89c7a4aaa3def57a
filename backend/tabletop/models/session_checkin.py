"""Session checkin model"""

import uuid

from sqlalchemy import Column, Boolean, Text, DateTime, ForeignKey, Uuid, Index
from tabletop.core.database import Base
from tabletop.core.utils import utc_now


class SessionCheckin(Base):
    """Recorded attendance for a session intent; lives and dies with the intent"""

    __tablename__ = "session_checkins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    session_intent_id = Column(
        Uuid,
        ForeignKey("session_intents.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    attendance = Column(Boolean, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        Index('idx_session_checkins_attendance', 'attendance'),
    )

    def __repr__(self):
        return f"<SessionCheckin(id={self.id}, session_intent_id={self.session_intent_id}, attendance={self.attendance})>"
