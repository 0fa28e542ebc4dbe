import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from voucher_admin.config import settings
from voucher_admin.errors import ValidationError
from voucher_admin.middleware.auth import STAFF_ROLES, get_api_client, require_role, require_staff
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.user import User, UserRole
from voucher_admin.models.voucher import Voucher
from voucher_admin.repositories.product_repo import ProductRepository
from voucher_admin.repositories.voucher_repo import VoucherRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.voucher import RedeemResponse, VoucherCreate, VoucherUpdate, VoucherView
from voucher_admin.services.api_client import ApiClient
from voucher_admin.services.voucher_lifecycle import VoucherLifecycle, ensure_expiration_change_allowed
from voucher_admin.utils.security import generate_voucher_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/vouchers", tags=["Vouchers"])


@router.get("", response_model=PaginatedList[Voucher])
async def list_vouchers(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """List vouchers"""
    return await VoucherRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/code/{code}", response_model=VoucherView)
async def get_voucher_by_code(
    code: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get voucher by code, with its effective status, redemption link and QR source"""
    voucher = await VoucherRepository(client).get_by_code(code)
    return VoucherView.build(voucher)


@router.get("/store/{store_id}", response_model=List[Voucher])
async def list_store_vouchers(
    store_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    return await VoucherRepository(client).get_by_store(store_id)


@router.get("/customer/{customer_id}", response_model=List[Voucher])
async def list_customer_vouchers(
    customer_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    return await VoucherRepository(client).get_by_customer(customer_id)


@router.post("/redeem/{code}", response_model=RedeemResponse)
async def redeem_voucher(
    code: str,
    current_user: User = Depends(require_role(*STAFF_ROLES, UserRole.CUSTOMER)),
    client: ApiClient = Depends(get_api_client),
):
    """
    Redeem a voucher.

    409 when already redeemed or when the platform refuses the redemption
    (the refreshed voucher is included), 410 when expired.
    """
    voucher = await VoucherLifecycle(VoucherRepository(client)).redeem(code)
    logger.info(f"Voucher {code} redeemed by {current_user.email}")
    return RedeemResponse(
        success=True,
        message="Voucher redeemed successfully",
        voucher=VoucherView.build(voucher),
    )


@router.get("/{voucher_id}", response_model=VoucherView)
async def get_voucher(
    voucher_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get voucher by ID"""
    voucher = await VoucherRepository(client).get_by_id(voucher_id)
    return VoucherView.build(voucher)


@router.post("", response_model=VoucherView, status_code=status.HTTP_201_CREATED)
async def create_voucher(
    voucher_data: VoucherCreate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """
    Create a voucher for a product.

    The amount is the product's price; the code is a suggestion the platform
    may replace.
    """
    product = await ProductRepository(client).get_by_id(voucher_data.product_id)
    if product.store_id and product.store_id != voucher_data.store_id:
        raise ValidationError(
            f"Product {product.id} belongs to another store",
            fields={"product": "Please select a product of the selected store"},
        )

    payload = voucher_data.to_payload()
    payload["amount"] = product.price
    payload["code"] = generate_voucher_code()
    if voucher_data.expiration_date is None:
        expires = datetime.now(timezone.utc) + timedelta(days=settings.VOUCHER_EXPIRY_DAYS)
        payload["expirationDate"] = expires.isoformat()

    voucher = await VoucherRepository(client).create(payload)
    return VoucherView.build(voucher)


@router.put("/{voucher_id}", response_model=VoucherView)
async def update_voucher(
    voucher_id: str,
    voucher_data: VoucherUpdate,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Update voucher gift details, template or expiration date

    A redeemed (409) or expired (410) voucher keeps its expiration date.
    """
    repo = VoucherRepository(client)
    if voucher_data.expiration_date is not None:
        current = await repo.get_by_id(voucher_id)
        ensure_expiration_change_allowed(current, voucher_data.expiration_date)
    voucher = await repo.update(voucher_id, voucher_data.to_payload())
    return VoucherView.build(voucher)


@router.delete("/{voucher_id}", response_model=MessageResponse)
async def delete_voucher(
    voucher_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Delete voucher"""
    await VoucherRepository(client).delete(voucher_id)
    return {"message": "Voucher deleted successfully"}
