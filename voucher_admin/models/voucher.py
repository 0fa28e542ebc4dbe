from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import field_validator, model_validator
from voucher_admin.errors import ValidationError
from voucher_admin.models.base import PlatformModel, as_utc
from voucher_admin.models.template import VoucherTemplate, normalize_template


class VoucherStatus(str, Enum):
    ACTIVE = "active"
    REDEEMED = "redeemed"
    EXPIRED = "expired"


class Voucher(PlatformModel):
    """
    A redeemable gift instrument.

    `status` is whatever the platform last stored and is only a hint; use
    `voucher_admin.services.voucher_lifecycle.effective_state` for any
    allow/deny decision.
    """

    code: str
    status: VoucherStatus = VoucherStatus.ACTIVE
    is_redeemed: bool = False
    expiration_date: datetime
    redeemed_at: Optional[datetime] = None

    # Weak references
    store_id: str
    product_id: str
    customer_id: Optional[str] = None

    amount: Optional[float] = None
    qr_code: Optional[str] = None

    # Gift details
    sender_name: str = ""
    sender_email: str = ""
    receiver_name: str = ""
    receiver_email: str = ""
    message: str = ""
    template: VoucherTemplate = VoucherTemplate.TEMPLATE1

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("expiration_date", "redeemed_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return as_utc(value)

    @field_validator("template", mode="before")
    @classmethod
    def _canonical_template(cls, value):
        try:
            return normalize_template(value)
        except ValidationError as exc:
            raise ValueError(exc.message)

    @field_validator("qr_code", mode="before")
    @classmethod
    def _blank_qr(cls, value):
        # The platform stores '' when it did not render a QR image
        return value or None

    @model_validator(mode="after")
    def _redeemed_flags(self):
        # redeemedAt is the only proof of redemption
        if self.redeemed_at is not None:
            self.status = VoucherStatus.REDEEMED
            self.is_redeemed = True
        elif self.status == VoucherStatus.REDEEMED:
            self.status = VoucherStatus.ACTIVE
            self.is_redeemed = False
        return self
