from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ListFilter(BaseModel):
    """
    Conjunctive filter shared by the list queries.

    Unset fields do not constrain the result. `limit <= 0` returns every
    matching row; pages are 1-based.
    """

    id: int | None = None
    email: str | None = None
    page: int = Field(default=1)
    limit: int = Field(default=0)


class PaginatedResponse(BaseModel, Generic[T]):
    data: list[T]
    total_results: int
    current_page: int
    items_per_page: int
