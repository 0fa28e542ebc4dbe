from typing import Generic, List, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedList(BaseModel, Generic[T]):
    """The canonical list envelope every list endpoint is reduced to"""

    items: List[T] = Field(default_factory=list)
    page: int
    limit: int
    total: int
    pages: int
