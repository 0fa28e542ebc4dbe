from pydantic import Field
from typing import Optional
from voucher_admin.models.user import UserRole
from voucher_admin.schemas.common import PayloadSchema


class UserCreate(PayloadSchema):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.CUSTOMER


class UserUpdate(PayloadSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[UserRole] = None
