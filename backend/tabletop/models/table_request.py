"""Table join request model"""

import uuid
from enum import Enum

from sqlalchemy import Column, Text, DateTime, ForeignKey, Uuid, Index, text
from tabletop.core.database import Base, status_enum
from tabletop.core.utils import utc_now


class TableRequestStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class TableRequest(Base):
    """Request by a user to join a table"""

    __tablename__ = "table_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(status_enum(TableRequestStatus), nullable=False, default=TableRequestStatus.PENDING)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        # Authoritative guard for one pending request per (user, table)
        Index(
            'uq_table_requests_pending_user_table',
            'user_id',
            'table_id',
            unique=True,
            postgresql_where=text("status = 'Pending'"),
            sqlite_where=text("status = 'Pending'"),
        ),
        Index('idx_table_requests_table', 'table_id'),
    )

    def __repr__(self):
        return f"<TableRequest(id={self.id}, user_id={self.user_id}, table_id={self.table_id}, status='{self.status}')>"
