"""Page/limit pagination shared by list endpoints"""

import math
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SAQuery

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

T = TypeVar("T")


class PaginationParams:
    """FastAPI dependency reading ?page=&limit="""

    def __init__(
        self,
        page: int = Query(DEFAULT_PAGE, ge=1),
        limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    ):
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class Page(BaseModel, Generic[T]):
    items: list[T]
    pagination: PaginationMeta


def paginate(query: SAQuery, params: PaginationParams) -> tuple[list[Any], PaginationMeta]:
    """Run count + skip/take on an ORM query"""
    total = query.order_by(None).count()
    items = query.offset(params.skip).limit(params.limit).all()
    meta = PaginationMeta(
        total=total,
        page=params.page,
        limit=params.limit,
        totalPages=math.ceil(total / params.limit),
    )
    return items, meta
