"""Table request schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from tabletop.models.table_request import TableRequestStatus


class TableRequestCreate(BaseModel):
    message: Optional[str] = Field(None, max_length=1000)


class TableRequestResponse(BaseModel):
    id: UUID
    user_id: UUID
    table_id: UUID
    message: Optional[str]
    status: TableRequestStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
