from pydantic import Field
from typing import Optional
from voucher_admin.schemas.common import PayloadSchema


class CustomerCreate(PayloadSchema):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    user_id: Optional[str] = None


class CustomerUpdate(PayloadSchema):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
