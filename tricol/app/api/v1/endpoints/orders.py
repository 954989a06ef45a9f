from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.api.deps import get_db
from tricol.app.db.models.core_types import OrderStatus
from tricol.app.db.models.models_v1 import Order
from tricol.app.schemas.order import OrderDetailRead, OrderLineRead, OrderRead
from tricol.app.schemas.page import Page, paginate
from tricol.services import fulfillment

router = APIRouter(prefix="/orders")


class OrderLineCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class OrderCreate(BaseModel):
    supplier_id: int
    status: OrderStatus = OrderStatus.pending
    date_created: datetime | None = None
    total_amount: Decimal | None = Field(default=None, ge=0)
    lines: list[OrderLineCreate] = Field(default_factory=list)


class OrderUpdate(BaseModel):
    status: OrderStatus | None = None
    supplier_id: int | None = None
    date_created: datetime | None = None
    total_amount: Decimal | None = Field(default=None, ge=0)


@router.get("", response_model=Page[OrderRead])
def list_orders(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    status: OrderStatus | None = None,
    supplier_id: int | None = None,
    db: Session = Depends(get_db),
):
    stmt = select(Order).order_by(Order.id)
    if status is not None:
        stmt = stmt.where(Order.status == status)
    if supplier_id is not None:
        stmt = stmt.where(Order.supplier_id == supplier_id)
    return paginate(db, stmt, page=page, size=size, schema=OrderRead)


@router.get("/{order_id}", response_model=OrderDetailRead)
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = fulfillment.get_order(db, order_id)
    return OrderDetailRead(
        **OrderRead.model_validate(order).model_dump(),
        lines=[OrderLineRead.model_validate(ln) for ln in fulfillment.list_order_lines(db, order_id)],
    )


@router.post("", response_model=OrderRead)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    order = fulfillment.create_order(
        db,
        supplier_id=payload.supplier_id,
        status=payload.status,
        date_created=payload.date_created,
        total_amount=payload.total_amount,
        lines=[(ln.product_id, ln.quantity) for ln in payload.lines],
    )
    db.commit()
    db.refresh(order)
    return order


@router.put("/{order_id}", response_model=OrderRead)
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    order = fulfillment.update_order(
        db,
        order_id,
        status=payload.status,
        supplier_id=payload.supplier_id,
        date_created=payload.date_created,
        total_amount=payload.total_amount,
    )
    db.commit()
    db.refresh(order)
    return order


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    fulfillment.delete_order(db, order_id)
    db.commit()
    return Response(status_code=204)


@router.get("/{order_id}/lines", response_model=list[OrderLineRead])
def list_order_lines(order_id: int, db: Session = Depends(get_db)):
    fulfillment.get_order(db, order_id)
    return fulfillment.list_order_lines(db, order_id)


@router.post("/{order_id}/lines", response_model=OrderLineRead, status_code=201)
def add_order_line(order_id: int, payload: OrderLineCreate, db: Session = Depends(get_db)):
    line = fulfillment.add_order_line(db, order_id, product_id=payload.product_id, quantity=payload.quantity)
    db.commit()
    db.refresh(line)
    return line
