"""Game system catalog model"""

import uuid

from sqlalchemy import Column, String, DateTime, Uuid
from tabletop.core.database import Base
from tabletop.core.utils import utc_now


class GameSystem(Base):
    """Rules system a table plays, e.g. D&D 5e; shared by every table"""

    __tablename__ = "game_systems"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(80), unique=True, nullable=False)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    def __repr__(self):
        return f"<GameSystem(id={self.id}, name='{self.name}')>"
