import re
from typing import Optional
from urllib.parse import urlencode
from voucher_admin.config import settings


def is_valid_email(email: Optional[str]) -> bool:
    """Basic shape check (something@domain.tld)"""
    if not email:
        return False
    return re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", email.strip()) is not None


def build_redemption_link(code: str, base_url: Optional[str] = None) -> str:
    """Public redemption page URL for a voucher code"""
    base = (base_url or settings.APP_URL).rstrip("/")
    return f"{base}/vouchers/redeem/{code}"


def build_qr_source(
    code: str,
    explicit_qr_url: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """
    QR image URL for a voucher.

    A QR image issued by the platform wins unchanged. Otherwise the image is
    rendered by the QR service and encodes the redemption link, never the bare
    code, so scanning lands on the redemption page.
    """
    if explicit_qr_url:
        return explicit_qr_url

    query = urlencode({
        "size": settings.QR_IMAGE_SIZE,
        "data": build_redemption_link(code, base_url),
    })
    return f"{settings.QR_SERVICE_URL}?{query}"


def format_currency(amount: Optional[float]) -> str:
    """Format amount as currency ($)"""
    if amount is None:
        return "-"
    return f"$ {amount:,.2f}"
