"""
Product ledger.

Owns a product's quantity on hand and its weighted average unit cost (CUMP).

Règle métier (réception) :
    cost_per_unit = (old_qty * old_cost + qty * price) / (old_qty + qty)
    quantity_on_hand = old_qty + qty
    unit_price = price  (prix courant, distinct du coût moyen)
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.core.logging import get_logger
from tricol.app.db.models.models_v1 import OrderLine, Product
from tricol.services.errors import Conflict, InsufficientStock, InvalidInput, NotFound

logger = get_logger(__name__)

COST_QUANT = Decimal("0.0001")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def weighted_average_cost(
    old_qty: int,
    old_cost: Decimal,
    incoming_qty: int,
    incoming_price: Decimal,
) -> Decimal:
    """
    Quantity-weighted mean of the current cost and the incoming price.

    Returns old_cost unchanged when the combined quantity is zero.
    """
    total_qty = old_qty + incoming_qty
    if total_qty == 0:
        return old_cost
    total_value = Decimal(old_qty) * old_cost + Decimal(incoming_qty) * incoming_price
    return (total_value / Decimal(total_qty)).quantize(COST_QUANT, rounding=ROUND_HALF_UP)


def get_product_by_name(db: Session, name: str, *, for_update: bool = False) -> Product | None:
    stmt = select(Product).where(Product.name == name)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def get_product(db: Session, product_id: int, *, for_update: bool = False) -> Product:
    stmt = select(Product).where(Product.id == product_id)
    if for_update:
        stmt = stmt.with_for_update()
    product = db.execute(stmt).scalar_one_or_none()
    if product is None:
        raise NotFound("Product", product_id)
    return product


def receive_stock(
    db: Session,
    *,
    name: str,
    quantity: int,
    unit_price,
    description: str | None = None,
    category: str | None = None,
) -> Product:
    """
    Book a supplier receipt against the product called `name`.

    Creates the product on first receipt (cost = price), otherwise folds the
    receipt into the weighted average cost. No stock movement is written.
    """
    if quantity < 0:
        raise InvalidInput("quantity must be >= 0", field="quantity")
    price = _to_decimal(unit_price)
    if price < 0:
        raise InvalidInput("unit_price must be >= 0", field="unit_price")

    product = get_product_by_name(db, name, for_update=True)

    if product is None:
        product = Product(
            name=name,
            description=description,
            category=category,
            unit_price=price,
            quantity_on_hand=quantity,
            cost_per_unit=price,
        )
        db.add(product)
        db.flush()
        logger.info("product_created", product_id=product.id, name=name, quantity=quantity, unit_price=str(price))
        return product

    old_qty = int(product.quantity_on_hand)
    old_cost = _to_decimal(product.cost_per_unit)

    product.cost_per_unit = weighted_average_cost(old_qty, old_cost, quantity, price)
    product.quantity_on_hand = old_qty + quantity
    product.unit_price = price
    if description is not None:
        product.description = description
    if category is not None:
        product.category = category

    db.flush()
    logger.info(
        "stock_received",
        product_id=product.id,
        received=quantity,
        quantity_on_hand=product.quantity_on_hand,
        cost_per_unit=str(product.cost_per_unit),
    )
    return product


def adjust_on_hand(db: Session, product_id: int, delta: int) -> Product:
    product = get_product(db, product_id, for_update=True)

    available = int(product.quantity_on_hand)
    if delta < 0 and -delta > available:
        raise InsufficientStock(product_id=product.id, requested=-delta, available=available)

    product.quantity_on_hand = available + delta
    db.flush()
    return product


def update_product(
    db: Session,
    product_id: int,
    *,
    name: str | None = None,
    description: str | None = None,
    category: str | None = None,
    unit_price=None,
    quantity_on_hand: int | None = None,
) -> Product:
    """
    Direct edit. Overwrites the fields given (None keeps the stored value)
    and leaves cost_per_unit alone.
    """
    product = get_product(db, product_id, for_update=True)

    if quantity_on_hand is not None and quantity_on_hand < 0:
        raise InvalidInput("quantity_on_hand must be >= 0", field="quantity_on_hand")
    price = None if unit_price is None else _to_decimal(unit_price)
    if price is not None and price < 0:
        raise InvalidInput("unit_price must be >= 0", field="unit_price")

    if name is not None and name != product.name:
        other = get_product_by_name(db, name)
        if other is not None and other.id != product.id:
            raise Conflict(f"Product name already exists: {name}", details={"name": name})
        product.name = name

    if description is not None:
        product.description = description
    if category is not None:
        product.category = category
    if price is not None:
        product.unit_price = price
    if quantity_on_hand is not None:
        product.quantity_on_hand = quantity_on_hand

    db.flush()
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = get_product(db, product_id)

    referenced = db.execute(
        select(OrderLine.order_id).where(OrderLine.product_id == product_id).limit(1)
    ).first()
    if referenced:
        raise Conflict(
            f"Product {product_id} is referenced by order lines",
            details={"product_id": product_id},
        )

    db.delete(product)
    db.flush()
