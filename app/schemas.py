"""Shared schema types used across domains"""

from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    CLIENT = "client"
    PHOTOGRAPHER = "photographer"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    COULD_NOT_DO = "could_not_do"
    DELETED = "deleted"


class MessageResponse(BaseModel):
    message: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(page=page, limit=limit, total=total, pages=pages)
