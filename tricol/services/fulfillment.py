"""
Order fulfillment.

Cycle de vie d'une commande :
    PENDING -> VALIDATED -> DELIVERED (terminal)

The caller picks the target status on create/update. Reaching DELIVERED
decrements stock for every line and records one OUT movement, all inside the
caller's transaction:

- vérification de TOUTES les lignes avant la moindre écriture
- verrouillage SQL (FOR UPDATE) sur la commande et les produits
- idempotent: `Order.stock_applied` empêche un double décrément
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.core.logging import get_logger
from tricol.app.db.models.core_types import MovementType, OrderStatus
from tricol.app.db.models.models_v1 import Order, OrderLine, Product, StockMovement, Supplier
from tricol.services.errors import Conflict, InsufficientStock, InvalidInput, NotFound
from tricol.services.ledger import adjust_on_hand, get_product
from tricol.services.movements import record_movement

logger = get_logger(__name__)


def _merge_lines(lines: Iterable[tuple[int, int]]) -> dict[int, int]:
    merged: Counter[int] = Counter()
    for product_id, quantity in lines:
        if quantity <= 0:
            raise InvalidInput("line quantity must be > 0", field="quantity")
        merged[int(product_id)] += int(quantity)
    return dict(merged)


def get_supplier(db: Session, supplier_id: int) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFound("Supplier", supplier_id)
    return supplier


def get_order(db: Session, order_id: int, *, for_update: bool = False) -> Order:
    stmt = select(Order).where(Order.id == order_id)
    if for_update:
        stmt = stmt.with_for_update()
    order = db.execute(stmt).scalar_one_or_none()
    if order is None:
        raise NotFound("Order", order_id)
    return order


def list_order_lines(db: Session, order_id: int) -> list[OrderLine]:
    return list(
        db.execute(
            select(OrderLine).where(OrderLine.order_id == order_id).order_by(OrderLine.product_id)
        )
        .scalars()
        .all()
    )


def deliver_order(db: Session, order: Order) -> StockMovement | None:
    """
    Apply the stock side effects of delivery to `order`.

    Returns the OUT movement, or None when stock was already applied.
    Raises InsufficientStock without touching any product if one line
    cannot be served.
    """
    if order.stock_applied:
        logger.info("delivery_already_applied", order_id=order.id)
        return None

    lines = list_order_lines(db, order.id)
    requested = _merge_lines((ln.product_id, ln.quantity) for ln in lines)

    # ---------- CHECK (aucune écriture) ----------
    products: dict[int, Product] = {}
    for product_id in sorted(requested):
        products[product_id] = get_product(db, product_id, for_update=True)

    for product_id, qty in requested.items():
        available = int(products[product_id].quantity_on_hand)
        if qty > available:
            logger.warning(
                "delivery_rejected",
                order_id=order.id,
                product_id=product_id,
                requested=qty,
                available=available,
            )
            raise InsufficientStock(product_id=product_id, requested=qty, available=available)

    # ---------- ACT ----------
    for product_id, qty in requested.items():
        adjust_on_hand(db, product_id, -qty)

    order.stock_applied = True
    db.flush()

    movement = record_movement(db, order_id=order.id, movement_type=MovementType.outbound)
    logger.info(
        "order_delivered",
        order_id=order.id,
        lines=len(lines),
        quantity=movement.quantity,
        movement_id=movement.id,
    )
    return movement


def create_order(
    db: Session,
    *,
    supplier_id: int,
    status: OrderStatus = OrderStatus.pending,
    date_created: datetime | None = None,
    total_amount=None,
    lines: Iterable[tuple[int, int]] = (),
) -> Order:
    """
    Create an order with its lines; `lines` holds (product_id, quantity) pairs.

    An order created already DELIVERED (backfill) is delivered in the same
    transaction.
    """
    get_supplier(db, supplier_id)

    requested = _merge_lines(lines)
    products = {pid: get_product(db, pid) for pid in requested}

    if total_amount is None:
        total_amount = sum(
            (Decimal(qty) * Decimal(products[pid].unit_price) for pid, qty in requested.items()),
            Decimal("0"),
        )
    else:
        total_amount = Decimal(str(total_amount))
        if total_amount < 0:
            raise InvalidInput("total_amount must be >= 0", field="total_amount")

    order = Order(
        supplier_id=supplier_id,
        status=status,
        total_amount=total_amount,
    )
    if date_created is not None:
        order.date_created = date_created
    db.add(order)
    db.flush()  # get order.id

    for product_id, qty in requested.items():
        db.add(OrderLine(order_id=order.id, product_id=product_id, quantity=qty))
    db.flush()

    logger.info("order_created", order_id=order.id, supplier_id=supplier_id, status=status.value, lines=len(requested))

    if status == OrderStatus.delivered:
        deliver_order(db, order)

    return order


def update_order(
    db: Session,
    order_id: int,
    *,
    status: OrderStatus | None = None,
    supplier_id: int | None = None,
    date_created: datetime | None = None,
    total_amount=None,
) -> Order:
    order = get_order(db, order_id, for_update=True)

    if supplier_id is not None and supplier_id != order.supplier_id:
        get_supplier(db, supplier_id)
        order.supplier_id = supplier_id
    if date_created is not None:
        order.date_created = date_created
    if total_amount is not None:
        total_amount = Decimal(str(total_amount))
        if total_amount < 0:
            raise InvalidInput("total_amount must be >= 0", field="total_amount")
        order.total_amount = total_amount

    if status is not None and status != order.status:
        if order.status == OrderStatus.delivered:
            raise InvalidInput(
                f"Order {order.id} is already delivered; status cannot change to {status.value}",
                field="status",
            )
        logger.info("order_status_changed", order_id=order.id, old=order.status.value, new=status.value)
        order.status = status

    db.flush()

    if order.status == OrderStatus.delivered:
        deliver_order(db, order)

    return order


def add_order_line(db: Session, order_id: int, *, product_id: int, quantity: int) -> OrderLine:
    """Add `quantity` of a product to an order whose stock is not yet applied."""
    order = get_order(db, order_id, for_update=True)
    if order.stock_applied:
        raise InvalidInput(f"Order {order.id} is already delivered; lines are frozen", field="order_id")
    if quantity <= 0:
        raise InvalidInput("line quantity must be > 0", field="quantity")
    product = get_product(db, product_id)

    line = db.get(OrderLine, (order.id, product_id))
    if line is None:
        line = OrderLine(order_id=order.id, product_id=product_id, quantity=quantity)
        db.add(line)
    else:
        line.quantity += quantity

    order.total_amount = Decimal(order.total_amount) + Decimal(quantity) * Decimal(product.unit_price)
    db.flush()
    return line


def delete_order(db: Session, order_id: int) -> None:
    order = get_order(db, order_id)

    has_movements = db.execute(
        select(StockMovement.id).where(StockMovement.order_id == order_id).limit(1)
    ).first()
    if has_movements:
        raise Conflict(
            f"Order {order_id} has stock movements and cannot be deleted",
            details={"order_id": order_id},
        )

    db.delete(order)
    db.flush()
