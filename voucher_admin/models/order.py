from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import field_validator, model_validator
from voucher_admin.models.base import PlatformModel, as_utc
from voucher_admin.models.template import VoucherTemplate
from voucher_admin.models.voucher import Voucher


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentProvider(str, Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    MERCADOPAGO = "mercadopago"


class PaymentDetails(PlatformModel):
    payment_id: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    provider: PaymentProvider
    amount: float
    payment_email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return as_utc(value)


class Order(PlatformModel):
    """An order owns exactly one voucher and one payment record"""

    customer_id: str
    payment_details: PaymentDetails
    voucher: Voucher
    emails_sent: bool = False
    pdf_generated: bool = False
    pdf_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _utc(cls, value):
        return as_utc(value)

    @model_validator(mode="after")
    def _voucher_amount(self):
        # The embedded voucher carries no amount of its own; it is the payment amount
        if self.voucher.amount is None:
            self.voucher.amount = self.payment_details.amount
        if self.voucher.customer_id is None:
            self.voucher.customer_id = self.customer_id
        return self

    def effective_status(self, now: Optional[datetime] = None) -> str:
        """Payment state until the payment completes, then the voucher's effective state"""
        from voucher_admin.services.voucher_lifecycle import effective_state

        if self.payment_details.payment_status != PaymentStatus.COMPLETED:
            return self.payment_details.payment_status.value
        return effective_state(self.voucher, now).value


# Outgoing payloads (POST /orders, PUT /orders/{id})

class OrderPaymentFormData(PlatformModel):
    payment_id: str
    payment_status: PaymentStatus
    payment_email: str
    amount: float
    provider: PaymentProvider


class OrderVoucherFormData(PlatformModel):
    store_id: str
    product_id: str
    expiration_date: str
    # Suggested code only; the platform may assign a different one
    code: Optional[str] = None
    sender_name: str = ""
    sender_email: str = ""
    receiver_name: str = ""
    receiver_email: str = ""
    message: str = ""
    template: VoucherTemplate = VoucherTemplate.TEMPLATE1


class OrderFormData(PlatformModel):
    customer_id: str
    payment_details: OrderPaymentFormData
    voucher: OrderVoucherFormData
