from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from voucher_admin.config import settings
from voucher_admin.middleware.auth import get_api_client, require_staff
from voucher_admin.models.customer import Customer
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.user import User
from voucher_admin.repositories.customer_repo import CustomerRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.customer import CustomerCreate, CustomerUpdate
from voucher_admin.services.api_client import ApiClient

router = APIRouter(prefix="/api/v1/customers", tags=["Customers"])


@router.get("", response_model=PaginatedList[Customer])
async def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """List customers"""
    return await CustomerRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(
    customer_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get customer by ID"""
    return await CustomerRepository(client).get_by_id(customer_id)


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Create a new customer"""
    return await CustomerRepository(client).create(customer_data.to_payload())


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Update customer"""
    return await CustomerRepository(client).update(customer_id, customer_data.to_payload())


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Delete customer"""
    await CustomerRepository(client).delete(customer_id)
    return {"message": "Customer deleted successfully"}
