"""
Shared schema building blocks.

All API payloads use camelCase on the wire (``pageSize``, ``jobId``) while
Python code keeps snake_case attribute names.
"""

import math
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that (de)serializes with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Page metadata returned alongside list endpoints."""
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "Pagination":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class SuccessResponse(CamelModel):
    """Generic acknowledgement for write endpoints."""
    success: bool = True
    message: Optional[str] = Field(None, description="Human readable outcome")
