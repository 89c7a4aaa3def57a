"""Security-related persistence models."""

import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid

from tabletop.core.database import Base
from tabletop.core.utils import utc_now


class RefreshToken(Base):
    """
    Opaque refresh token.

    The unique user_id column keeps at most one active token per user; a row
    is deleted when the token is rotated or revoked.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    token = Column(String(128), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(), nullable=False)
    created_at = Column(DateTime(), default=utc_now, nullable=False)

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
