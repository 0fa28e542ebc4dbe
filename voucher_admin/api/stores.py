from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from voucher_admin.config import settings
from voucher_admin.middleware.auth import get_api_client, require_role, require_staff
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.store import Store
from voucher_admin.models.user import User
from voucher_admin.repositories.store_repo import StoreRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.store import StoreCreate, StoreUpdate
from voucher_admin.services.api_client import ApiClient

router = APIRouter(prefix="/api/v1/stores", tags=["Stores"])


@router.get("", response_model=PaginatedList[Store])
async def list_stores(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """List stores"""
    return await StoreRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/{store_id}", response_model=Store)
async def get_store(
    store_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get store by ID"""
    return await StoreRepository(client).get_by_id(store_id)


@router.post("", response_model=Store, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_data: StoreCreate,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Create a new store (admins only)"""
    return await StoreRepository(client).create(store_data.to_payload())


@router.put("/{store_id}", response_model=Store)
async def update_store(
    store_id: str,
    store_data: StoreUpdate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Update store"""
    return await StoreRepository(client).update(store_id, store_data.to_payload())


@router.delete("/{store_id}", response_model=MessageResponse)
async def delete_store(
    store_id: str,
    current_user: User = Depends(require_role()),
    client: ApiClient = Depends(get_api_client),
):
    """Delete store (admins only)"""
    await StoreRepository(client).delete(store_id)
    return {"message": "Store deleted successfully"}
