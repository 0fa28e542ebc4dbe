from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from voucher_admin.config import settings
from voucher_admin.middleware.auth import get_api_client, get_current_user, require_role
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.user import User
from voucher_admin.repositories.user_repo import UserRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.user import UserCreate, UserUpdate
from voucher_admin.services.api_client import ApiClient

router = APIRouter(prefix="/api/v1", tags=["Users"])


@router.get("/auth/me", response_model=User)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user"""
    return current_user


@router.get("/users", response_model=PaginatedList[User])
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """List users (admins only)"""
    return await UserRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/users/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Get user by ID"""
    return await UserRepository(client).get_by_id(user_id)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Create a new user"""
    return await UserRepository(client).create(user_data.to_payload())


@router.put("/users/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Update user"""
    return await UserRepository(client).update(user_id, user_data.to_payload())


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Delete user"""
    await UserRepository(client).delete(user_id)
    return {"message": "User deleted successfully"}
