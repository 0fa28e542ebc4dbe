from fastapi import APIRouter, Depends
from voucher_admin.middleware.auth import get_public_api_client
from voucher_admin.repositories.voucher_repo import VoucherRepository
from voucher_admin.schemas.voucher import PublicVoucherView
from voucher_admin.services.api_client import ApiClient

# Target of the redemption link printed on vouchers and encoded in their QR codes
router = APIRouter(prefix="/vouchers", tags=["Public Vouchers"])


@router.get("/redeem/{code}", response_model=PublicVoucherView)
async def view_voucher_for_redemption(
    code: str,
    client: ApiClient = Depends(get_public_api_client),
):
    """Public redemption page data (no authentication required)"""
    voucher = await VoucherRepository(client).get_by_code(code)
    return PublicVoucherView.build(voucher)
