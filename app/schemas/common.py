"""Shared response schemas."""

from pydantic import BaseModel


class Pagination(BaseModel):
    """Page metadata for list endpoints (pages are 1-indexed)."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
