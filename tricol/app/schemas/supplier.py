from pydantic import BaseModel


class SupplierRead(BaseModel):
    id: int
    company_name: str
    address: str | None = None
    contact: str | None = None
    email: str | None = None
    phone: str | None = None
    city: str | None = None
    tax_code: str | None = None

    class Config:
        from_attributes = True
