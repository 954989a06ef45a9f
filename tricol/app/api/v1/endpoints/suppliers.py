from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from tricol.app.api.deps import get_db
from tricol.app.db.models.models_v1 import Order, Supplier
from tricol.app.schemas.page import Page, paginate
from tricol.app.schemas.supplier import SupplierRead
from tricol.services.errors import Conflict
from tricol.services import fulfillment

router = APIRouter(prefix="/suppliers")


class SupplierWrite(BaseModel):
    company_name: str = Field(min_length=1, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    contact: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    city: str | None = Field(default=None, max_length=128)
    tax_code: str | None = Field(default=None, max_length=32)


@router.get("", response_model=Page[SupplierRead])
def list_suppliers(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return paginate(db, select(Supplier).order_by(Supplier.id), page=page, size=size, schema=SupplierRead)


@router.get("/{supplier_id}", response_model=SupplierRead)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return fulfillment.get_supplier(db, supplier_id)


@router.post("", response_model=SupplierRead, status_code=201)
def create_supplier(payload: SupplierWrite, db: Session = Depends(get_db)):
    s = Supplier(**payload.model_dump())
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@router.put("/{supplier_id}", response_model=SupplierRead)
def update_supplier(supplier_id: int, payload: SupplierWrite, db: Session = Depends(get_db)):
    s = fulfillment.get_supplier(db, supplier_id)
    for field, value in payload.model_dump().items():
        setattr(s, field, value)
    db.commit()
    db.refresh(s)
    return s


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    s = fulfillment.get_supplier(db, supplier_id)

    # Orders keep a hard reference to their supplier
    in_use = db.execute(select(Order.id).where(Order.supplier_id == supplier_id).limit(1)).first()
    if in_use:
        raise Conflict(
            f"Supplier {supplier_id} is referenced by orders",
            details={"supplier_id": supplier_id},
        )

    db.delete(s)
    db.commit()
    return Response(status_code=204)
