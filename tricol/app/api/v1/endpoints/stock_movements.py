from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.api.deps import get_db
from tricol.app.db.models.core_types import MovementType
from tricol.app.db.models.models_v1 import StockMovement
from tricol.app.schemas.page import Page, paginate
from tricol.app.schemas.stock_movement import MovementTotalRead, StockMovementRead
from tricol.services import movements

router = APIRouter(prefix="/stock-movements")


# ---------- Schemas ----------
class StockMovementCreate(BaseModel):
    order_id: int
    movement_type: MovementType
    movement_date: str | None = None  # ISO-8601, date du jour si absent
    quantity: int | None = None  # ignoré: recalculé depuis les lignes de commande


# ---------- Endpoints ----------
@router.get("", response_model=Page[StockMovementRead])
def list_stock_movements(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    order_id: int | None = None,
    movement_type: MovementType | None = None,
    db: Session = Depends(get_db),
):
    stmt = select(StockMovement).order_by(StockMovement.id)
    if order_id is not None:
        stmt = stmt.where(StockMovement.order_id == order_id)
    if movement_type is not None:
        stmt = stmt.where(StockMovement.movement_type == movement_type)
    return paginate(db, stmt, page=page, size=size, schema=StockMovementRead)


@router.get("/total", response_model=MovementTotalRead)
def total_stock_movements(db: Session = Depends(get_db)):
    return MovementTotalRead(total_quantity=movements.total_movement_quantity(db))


@router.get("/{movement_id}", response_model=StockMovementRead)
def get_stock_movement(movement_id: int, db: Session = Depends(get_db)):
    return movements.get_movement(db, movement_id)


@router.post("", response_model=StockMovementRead)
def create_stock_movement(payload: StockMovementCreate, db: Session = Depends(get_db)):
    mv = movements.record_movement(
        db,
        order_id=payload.order_id,
        movement_type=payload.movement_type,
        movement_date=payload.movement_date,
    )
    db.commit()
    db.refresh(mv)
    return mv
