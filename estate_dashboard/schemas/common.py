"""
Shared schema building blocks: camelCase base model, success envelope and pagination.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Generic, TypeVar
import math

DataType = TypeVar("DataType")


class CamelModel(BaseModel):
    """Base schema serialising to camelCase keys while accepting snake_case input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(CamelModel, Generic[DataType]):
    """Success envelope: {"success": true, "data": ...}."""

    success: bool = Field(True, description="Always true for successful responses")
    data: DataType


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class PageMeta(CamelModel):
    """Pagination metadata shared by every paginated list."""

    total_items: int = Field(..., description="Number of records matching the filters")
    total_pages: int = Field(..., description="Number of pages at the requested page size")
    current_page: int = Field(..., description="Current page number, starting at 1")


def page_meta(total_items: int, page: int, limit: int) -> dict:
    """Field values for a PageMeta subclass."""
    return {
        "total_items": total_items,
        "total_pages": math.ceil(total_items / limit) if limit else 0,
        "current_page": page,
    }


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page number."""
    return (page - 1) * limit
