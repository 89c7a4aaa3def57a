"""Shared schema pieces"""

from typing import ClassVar, FrozenSet

from pydantic import BaseModel, Field, model_validator


class QueryOptions(BaseModel):
    """
    Pagination and ordering for list queries.

    Routers build this from query parameters so the defaults configured in
    settings are applied at the boundary; repositories never invent their own.
    """
    limit: int = Field(50, ge=1)
    offset: int = Field(0, ge=0)
    descending: bool = True


class PatchModel(BaseModel):
    """
    Partial update command.

    Only fields listed in ``nullable_fields`` may be sent as an explicit null;
    the rest must be omitted or carry a value.
    """
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        cleared = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable_fields
        )
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


def patch_values(command: BaseModel, exclude: set = None) -> dict:
    """
    Fields the caller actually sent.

    An absent field is left untouched; a field sent as null is written as null.
    """
    return command.model_dump(exclude_unset=True, exclude=exclude or set())
