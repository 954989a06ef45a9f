from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from tricol.app.core.logging import get_logger
from tricol.app.db.models.core_types import MovementType
from tricol.app.db.models.models_v1 import Order, OrderLine, StockMovement
from tricol.services.errors import InvalidInput, NotFound

logger = get_logger(__name__)


def resolve_movement_date(value: date | str | None) -> date:
    """
    Date du mouvement :
    - date fournie (ou chaîne AAAA-MM-JJ valide) -> conservée telle quelle
    - rien / chaîne vide -> date du jour
    """
    if value is None:
        return date.today()
    if isinstance(value, date):
        return value

    text = value.strip()
    if not text:
        return date.today()
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidInput(f"Invalid movement_date: {value!r}", field="movement_date") from None


def order_line_quantity(db: Session, order_id: int) -> int:
    total = db.execute(
        select(func.coalesce(func.sum(OrderLine.quantity), 0)).where(OrderLine.order_id == order_id)
    ).scalar_one()
    return int(total)


def record_movement(
    db: Session,
    *,
    order_id: int,
    movement_type: MovementType,
    movement_date: date | str | None = None,
) -> StockMovement:
    """
    Persist one stock movement for `order_id`.

    The quantity is always the sum of the order's line quantities at call
    time; there is no way to pass one in.
    """
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order", order_id)

    mv = StockMovement(
        order_id=order.id,
        movement_type=movement_type,
        quantity=order_line_quantity(db, order.id),
        movement_date=resolve_movement_date(movement_date),
    )
    db.add(mv)
    db.flush()

    logger.info(
        "stock_movement_recorded",
        movement_id=mv.id,
        order_id=order.id,
        movement_type=movement_type.value,
        quantity=mv.quantity,
        movement_date=mv.movement_date.isoformat(),
    )
    return mv


def get_movement(db: Session, movement_id: int) -> StockMovement:
    mv = db.get(StockMovement, movement_id)
    if mv is None:
        raise NotFound("StockMovement", movement_id)
    return mv


def total_movement_quantity(db: Session) -> int:
    """
    Sum of `quantity` over every movement.

    IN and OUT are both counted positively: this is an activity total, not a
    net stock balance.
    """
    total = db.execute(select(func.coalesce(func.sum(StockMovement.quantity), 0))).scalar_one()
    return int(total)
