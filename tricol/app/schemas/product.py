from decimal import Decimal

from pydantic import BaseModel


class ProductRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    category: str | None = None
    unit_price: Decimal
    quantity_on_hand: int
    cost_per_unit: Decimal  # CUMP, READ ONLY: recalculé à chaque réception

    class Config:
        from_attributes = True
