"""Game table model"""

import uuid
from enum import Enum

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Uuid, Index, CheckConstraint
from tabletop.core.database import Base, status_enum
from tabletop.core.utils import utc_now


class TableStatus(str, Enum):
    """Whether a table accepts join requests"""
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Table(Base):
    """A GM-owned table; gm_id anchors every ownership check below it"""

    __tablename__ = "tables"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    gm_id = Column(Uuid, nullable=False)
    title = Column(String(120), nullable=False)
    description = Column(Text, nullable=False, default="")
    player_slots = Column(Integer, nullable=False, default=4)
    game_system_id = Column(Uuid, ForeignKey("game_systems.id", ondelete="SET NULL"), nullable=True)
    status = Column(status_enum(TableStatus), nullable=False, default=TableStatus.ACTIVE)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    __table_args__ = (
        Index('idx_tables_gm', 'gm_id'),
        CheckConstraint('player_slots > 0', name='chk_player_slots_positive'),
    )

    def __repr__(self):
        return f"<Table(id={self.id}, gm_id={self.gm_id}, title='{self.title}')>"
