"""User model"""

import uuid

from sqlalchemy import Column, String, DateTime, Uuid
from tabletop.core.database import Base
from tabletop.core.utils import utc_now


class User(Base):
    """Registered account; referenced by id from every other entity"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(), default=utc_now, nullable=False)
    updated_at = Column(DateTime(), default=utc_now, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
