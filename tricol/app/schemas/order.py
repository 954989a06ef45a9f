from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from tricol.app.db.models.core_types import OrderStatus


class OrderLineRead(BaseModel):
    order_id: int
    product_id: int
    quantity: int

    class Config:
        from_attributes = True


class OrderRead(BaseModel):
    id: int
    supplier_id: int
    date_created: datetime
    status: OrderStatus
    total_amount: Decimal
    stock_applied: bool  # READ ONLY

    class Config:
        from_attributes = True


class OrderDetailRead(OrderRead):
    lines: list[OrderLineRead] = []
