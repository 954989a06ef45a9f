from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.api.deps import get_db
from tricol.app.db.models.models_v1 import Product
from tricol.app.schemas.page import Page, paginate
from tricol.app.schemas.product import ProductRead
from tricol.services import ledger

router = APIRouter(prefix="/products")


class ProductWrite(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=128)
    unit_price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    quantity: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=128)
    unit_price: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    quantity: int | None = Field(default=None, ge=0)


@router.get("", response_model=Page[ProductRead])
def list_products(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    category: str | None = None,
    db: Session = Depends(get_db),
):
    stmt = select(Product).order_by(Product.id)
    if category is not None:
        stmt = stmt.where(Product.category == category)
    return paginate(db, stmt, page=page, size=size, schema=ProductRead)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ledger.get_product(db, product_id)


@router.post("", response_model=ProductRead, status_code=201)
def create_product(payload: ProductWrite, db: Session = Depends(get_db)):
    """
    Réception fournisseur (upsert par nom)
    - produit inconnu -> création, CUMP = prix
    - produit connu -> stock += quantité, CUMP recalculé
    """
    p = ledger.receive_stock(
        db,
        name=payload.name,
        quantity=payload.quantity,
        unit_price=payload.unit_price,
        description=payload.description,
        category=payload.category,
    )
    db.commit()
    db.refresh(p)
    return p


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    # omitted fields keep their stored value
    p = ledger.update_product(
        db,
        product_id,
        name=payload.name,
        description=payload.description,
        category=payload.category,
        unit_price=payload.unit_price,
        quantity_on_hand=payload.quantity,
    )
    db.commit()
    db.refresh(p)
    return p


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    ledger.delete_product(db, product_id)
    db.commit()
    return Response(status_code=204)
