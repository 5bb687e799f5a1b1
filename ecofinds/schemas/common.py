# ecofinds/schemas/common.py
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

DataT = TypeVar("DataT")


class CamelModel(SQLModel):
    """
    Base for every request/response schema.

    Python side uses snake_case, the wire uses camelCase
    (e.g. display_name <-> displayName). Both spellings are accepted
    on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Envelope returned by every endpoint:

        {"success": true, "message": "...", "data": {...}}

    Errors use the same envelope (see core.errors).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str | None = None
    data: DataT | None = None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    has_more: bool
