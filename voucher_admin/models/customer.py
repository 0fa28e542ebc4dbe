from typing import Optional
from voucher_admin.models.base import PlatformModel


class Customer(PlatformModel):
    # Linked user account, if the customer registered
    user_id: Optional[str] = None

    # Basic info
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None

    # Address
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
