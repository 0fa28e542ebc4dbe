from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from voucher_admin.errors import AuthenticationError, ApiError, NotFound
from voucher_admin.models.user import User, UserRole
from voucher_admin.repositories.user_repo import UserRepository
from voucher_admin.services.api_client import ApiClient, StaticCredentials


security = HTTPBearer(auto_error=False)


def get_credentials(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> StaticCredentials:
    """Bearer token of the admin making the request, passed on to the platform"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return StaticCredentials(credentials.credentials)


def get_api_client(credentials: StaticCredentials = Depends(get_credentials)) -> ApiClient:
    """Platform client acting on behalf of the current admin"""
    return ApiClient(credentials)


def get_public_api_client() -> ApiClient:
    """Platform client for unauthenticated public pages (API key only)"""
    return ApiClient(StaticCredentials(None))


async def get_current_user(client: ApiClient = Depends(get_api_client)) -> User:
    """Resolve the current user through the platform's auth endpoint"""
    try:
        return await UserRepository(client).get_current()
    except (NotFound, AuthenticationError):
        raise AuthenticationError("Could not validate credentials")


def require_role(*roles: UserRole):
    """Dependency to require one of the given roles (admins always pass)"""
    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.is_admin or user.role in roles:
            return user
        raise ApiError(f"Role '{user.role.value}' is not allowed here", status_code=403)

    return role_checker


STAFF_ROLES = (UserRole.STORE_MANAGER, UserRole.MANAGER)

# Catalog, order, voucher and customer pages are for admins and store staff
require_staff = require_role(*STAFF_ROLES)
