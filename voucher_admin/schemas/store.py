from pydantic import Field
from typing import Optional
from voucher_admin.models.store import StoreSocial
from voucher_admin.schemas.common import PayloadSchema


class StoreCreate(PayloadSchema):
    name: str = Field(..., min_length=1, max_length=200)
    owner_id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None  # URL of an already uploaded image
    social: StoreSocial = Field(default_factory=StoreSocial)


class StoreUpdate(PayloadSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    owner_id: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    logo: Optional[str] = None
    social: Optional[StoreSocial] = None
