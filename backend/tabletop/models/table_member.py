"""Table membership model"""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Uuid, UniqueConstraint, Index
from tabletop.core.database import Base
from tabletop.core.utils import utc_now


class TableMember(Base):
    """A player admitted to a table; written when the GM approves a request"""

    __tablename__ = "table_members"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, nullable=False)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint('table_id', 'user_id', name='uq_table_members_table_user'),
        Index('idx_table_members_user', 'user_id'),
    )

    def __repr__(self):
        return f"<TableMember(id={self.id}, table_id={self.table_id}, user_id={self.user_id})>"
