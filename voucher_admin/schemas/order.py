from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal, Optional
from voucher_admin.models.order import Order, PaymentProvider, PaymentStatus
from voucher_admin.schemas.common import PayloadSchema, ViewSchema
from voucher_admin.services.order_assembler import CodeReconciliation
from voucher_admin.utils.helpers import build_qr_source, build_redemption_link


class PaymentInput(PayloadSchema):
    payment_id: str = Field(..., min_length=1)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    provider: PaymentProvider
    payment_email: str = Field(..., min_length=3)


class GiftDetailsInput(PayloadSchema):
    """Omitted fields keep the draft's current value"""

    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    receiver_name: Optional[str] = None
    receiver_email: Optional[str] = None
    message: Optional[str] = None


class OrderSelection(PayloadSchema):
    """
    What the admin picked in the order form.

    No amount field: the amount comes from the selected product's price.
    """

    customer_id: Optional[str] = None
    store_id: Optional[str] = None
    product_id: Optional[str] = None
    payment: PaymentInput
    gift: Optional[GiftDetailsInput] = None
    template: Optional[str] = None
    expiration_date: Optional[datetime] = None
    preview_code: Optional[str] = None


class OrderView(ViewSchema):
    order: Order
    effective_status: str
    redemption_link: str
    qr_source: str

    @classmethod
    def build(cls, order: Order, now: Optional[datetime] = None) -> "OrderView":
        code = order.voucher.code
        return cls(
            order=order,
            effective_status=order.effective_status(now),
            redemption_link=build_redemption_link(code),
            qr_source=build_qr_source(code, order.voucher.qr_code),
        )


class ReconciliationView(ViewSchema):
    preview_code: Optional[str] = None
    issued_code: str
    redemption_link: str
    qr_source: str
    mismatch: bool

    @classmethod
    def build(cls, reconciliation: CodeReconciliation) -> "ReconciliationView":
        return cls(
            preview_code=reconciliation.preview_code,
            issued_code=reconciliation.issued_code,
            redemption_link=reconciliation.redemption_link,
            qr_source=reconciliation.qr_source,
            mismatch=reconciliation.mismatch,
        )


class OrderResultResponse(ViewSchema):
    order: OrderView
    reconciliation: ReconciliationView


class PreviewCodeResponse(ViewSchema):
    code: str
    redemption_link: str
    qr_source: str


class PdfResponse(BaseModel):
    url: str


class ResendEmailRequest(BaseModel):
    target: Literal["customer", "receiver", "store", "all"] = "all"
