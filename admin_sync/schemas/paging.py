"""Paged list response shared by the users and roles endpoints."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PagedData(BaseModel, Generic[T]):
    """Response body for GET /users and GET /roles: one page of items plus the total page count."""

    data: list[T] = Field(default_factory=list)
    pages: int = Field(default=0, ge=0, description="Total number of pages for the query.")
