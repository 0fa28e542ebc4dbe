from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator
from voucher_admin.models.base import PlatformModel, as_utc


class Product(PlatformModel):
    name: str
    description: str = ""
    store_id: str
    price: float = Field(..., ge=0)
    images: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return as_utc(value)
