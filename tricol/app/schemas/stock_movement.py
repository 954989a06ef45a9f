from datetime import date

from pydantic import BaseModel

from tricol.app.db.models.core_types import MovementType


class StockMovementRead(BaseModel):
    id: int
    order_id: int
    movement_type: MovementType
    quantity: int  # READ ONLY: somme des lignes de la commande
    movement_date: date

    class Config:
        from_attributes = True


class MovementTotalRead(BaseModel):
    total_quantity: int
