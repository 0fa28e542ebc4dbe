from enum import Enum
from voucher_admin.models.base import PlatformModel


class UserRole(str, Enum):
    ADMIN = "admin"
    STORE_MANAGER = "store_manager"
    MANAGER = "manager"
    CUSTOMER = "customer"


class User(PlatformModel):
    name: str
    email: str
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
