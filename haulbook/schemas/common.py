"""Response envelope and pagination schemas shared by every endpoint."""

import math
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every response body."""

    success: bool = True
    message: str
    data: T | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Page(BaseModel, Generic[T]):
    """Schema for a paginated list."""

    items: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total: int, page: int, limit: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


def error_body(message: str, code: str) -> dict:
    """Envelope for a failed request, ready for JSONResponse."""
    return ApiResponse[None](success=False, message=message, error=code).model_dump(mode="json")
