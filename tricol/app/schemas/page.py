import math
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, select, func
from sqlalchemy.orm import Session

T = TypeVar("T", bound=BaseModel)


class Page(BaseModel, Generic[T]):
    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int


def paginate(db: Session, stmt: Select, *, page: int, size: int, schema: type[T]) -> Page[T]:
    """Run `stmt` for one page (0-based) and wrap the rows in `schema`."""
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = db.execute(stmt.offset(page * size).limit(size)).scalars().all()
    return Page[schema](
        content=[schema.model_validate(r) for r in rows],
        page=page,
        size=size,
        total_elements=total,
        total_pages=math.ceil(total / size) if size else 0,
    )
