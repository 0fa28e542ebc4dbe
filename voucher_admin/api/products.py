from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from voucher_admin.config import settings
from voucher_admin.middleware.auth import get_api_client, require_staff
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.product import Product
from voucher_admin.models.user import User
from voucher_admin.repositories.product_repo import ProductRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.product import ProductCreate, ProductUpdate
from voucher_admin.services.api_client import ApiClient

router = APIRouter(prefix="/api/v1/products", tags=["Products"])


@router.get("", response_model=PaginatedList[Product])
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """List products"""
    return await ProductRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/store/{store_id}", response_model=List[Product])
async def list_store_products(
    store_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """All products of a store"""
    return await ProductRepository(client).get_by_store(store_id)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get product by ID"""
    return await ProductRepository(client).get_by_id(product_id)


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Create a new product"""
    return await ProductRepository(client).create(product_data.to_payload())


@router.put("/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    product_data: ProductUpdate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Update product"""
    return await ProductRepository(client).update(product_id, product_data.to_payload())


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Delete product"""
    await ProductRepository(client).delete(product_id)
    return {"message": "Product deleted successfully"}
