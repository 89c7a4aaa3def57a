"""Table member schemas"""

from pydantic import AliasChoices, BaseModel, Field
from datetime import datetime
from uuid import UUID


class TableMemberResponse(BaseModel):
    table_id: UUID
    user_id: UUID
    # Read from the ORM row's created_at
    joined_at: datetime = Field(validation_alias=AliasChoices("created_at", "joined_at"))

    class Config:
        from_attributes = True
