from datetime import datetime
from pydantic import Field, field_validator
from typing import Optional
from voucher_admin.errors import ValidationError
from voucher_admin.models.template import VoucherTemplate, normalize_template
from voucher_admin.models.voucher import Voucher, VoucherStatus
from voucher_admin.schemas.common import PayloadSchema, ViewSchema
from voucher_admin.services.voucher_lifecycle import effective_state
from voucher_admin.utils.helpers import build_qr_source, build_redemption_link, format_currency


def _template(value):
    try:
        return normalize_template(value)
    except ValidationError as exc:
        raise ValueError(exc.message)


class VoucherCreate(PayloadSchema):
    store_id: str
    product_id: str
    customer_id: Optional[str] = None
    expiration_date: Optional[datetime] = None  # Defaults to VOUCHER_EXPIRY_DAYS from now
    sender_name: str = Field(..., min_length=1)
    sender_email: str = Field(..., min_length=3)
    receiver_name: str = Field(..., min_length=1)
    receiver_email: str = Field(..., min_length=3)
    message: str = ""
    template: VoucherTemplate = VoucherTemplate.TEMPLATE1

    @field_validator("template", mode="before")
    @classmethod
    def _normalize_template(cls, value):
        return _template(value)


class VoucherUpdate(PayloadSchema):
    # No status here: redemption goes through the redeem endpoint and expiry is time-based
    expiration_date: Optional[datetime] = None
    sender_name: Optional[str] = Field(None, min_length=1)
    sender_email: Optional[str] = Field(None, min_length=3)
    receiver_name: Optional[str] = Field(None, min_length=1)
    receiver_email: Optional[str] = Field(None, min_length=3)
    message: Optional[str] = None
    template: Optional[VoucherTemplate] = None

    @field_validator("template", mode="before")
    @classmethod
    def _normalize_template(cls, value):
        return None if value is None else _template(value)


class VoucherView(ViewSchema):
    voucher: Voucher
    effective_status: VoucherStatus
    redeemable: bool
    redemption_link: str
    qr_source: str

    @classmethod
    def build(cls, voucher: Voucher, now: Optional[datetime] = None) -> "VoucherView":
        state = effective_state(voucher, now)
        return cls(
            voucher=voucher,
            effective_status=state,
            redeemable=state == VoucherStatus.ACTIVE,
            redemption_link=build_redemption_link(voucher.code),
            qr_source=build_qr_source(voucher.code, voucher.qr_code),
        )


class PublicVoucherView(ViewSchema):
    """What the public redemption page may show (no emails, no internal ids)"""

    code: str
    status: VoucherStatus
    redeemable: bool
    amount: Optional[float] = None
    amount_display: str
    expiration_date: datetime
    redeemed_at: Optional[datetime] = None
    sender_name: str
    receiver_name: str
    message: str
    template: VoucherTemplate
    qr_source: str

    @classmethod
    def build(cls, voucher: Voucher, now: Optional[datetime] = None) -> "PublicVoucherView":
        state = effective_state(voucher, now)
        return cls(
            code=voucher.code,
            status=state,
            redeemable=state == VoucherStatus.ACTIVE,
            amount=voucher.amount,
            amount_display=format_currency(voucher.amount),
            expiration_date=voucher.expiration_date,
            redeemed_at=voucher.redeemed_at,
            sender_name=voucher.sender_name,
            receiver_name=voucher.receiver_name,
            message=voucher.message,
            template=voucher.template,
            qr_source=build_qr_source(voucher.code, voucher.qr_code),
        )


class RedeemResponse(ViewSchema):
    success: bool
    message: str
    voucher: VoucherView
