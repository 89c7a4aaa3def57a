"""Game session model"""

import uuid
from enum import Enum

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Uuid, Index
from tabletop.core.database import Base, status_enum
from tabletop.core.utils import utc_now


class SessionStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class GameSession(Base):
    """A scheduled sitting of a table"""

    __tablename__ = "sessions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=False, default="")
    scheduled_for = Column(DateTime(), nullable=True)
    status = Column(status_enum(SessionStatus), nullable=False, default=SessionStatus.SCHEDULED)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        Index('idx_sessions_table', 'table_id'),
    )

    def __repr__(self):
        return f"<GameSession(id={self.id}, table_id={self.table_id}, status='{self.status}')>"
