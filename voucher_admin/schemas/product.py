from pydantic import Field
from typing import List, Optional
from voucher_admin.schemas.common import PayloadSchema


class ProductCreate(PayloadSchema):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    store_id: str
    price: float = Field(..., ge=0)
    images: Optional[List[str]] = None
    is_active: bool = True


class ProductUpdate(PayloadSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    store_id: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None
