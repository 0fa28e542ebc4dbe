"""
Build the order (and the voucher it issues) from what the admin selected.

The voucher's value always comes from a real catalog price: the amount is
derived from the selected product and cannot be typed in. Switching store or
product drops the derived amount until a product of the new selection prices
it again.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Union
from voucher_admin.config import settings
from voucher_admin.errors import AdminError, NotFound, ValidationError
from voucher_admin.models.base import as_utc
from voucher_admin.models.order import (
    Order, OrderFormData, OrderPaymentFormData, OrderVoucherFormData, PaymentProvider, PaymentStatus
)
from voucher_admin.models.product import Product
from voucher_admin.models.template import VoucherTemplate, normalize_template
from voucher_admin.models.voucher import Voucher
from voucher_admin.repositories.customer_repo import CustomerRepository
from voucher_admin.repositories.order_repo import OrderRepository
from voucher_admin.repositories.product_repo import ProductRepository
from voucher_admin.repositories.store_repo import StoreRepository
from voucher_admin.services.voucher_lifecycle import ensure_expiration_change_allowed
from voucher_admin.utils.helpers import build_qr_source, build_redemption_link, is_valid_email
from voucher_admin.utils.security import generate_voucher_code

logger = logging.getLogger(__name__)


@dataclass
class OrderDraft:
    """Form state of an order being created or edited"""

    customer_id: Optional[str] = None
    store_id: Optional[str] = None
    product_id: Optional[str] = None
    products: List[Product] = field(default_factory=list)
    product_load_error: Optional[str] = None

    # Payment
    payment_id: str = ""
    payment_status: PaymentStatus = PaymentStatus.PENDING
    provider: Optional[PaymentProvider] = None
    payment_email: str = ""

    # Gift details
    sender_name: str = ""
    sender_email: str = ""
    receiver_name: str = ""
    receiver_email: str = ""
    message: str = ""
    template: VoucherTemplate = VoucherTemplate.TEMPLATE1

    expiration_date: Optional[datetime] = None
    preview_code: Optional[str] = None
    editing_order_id: Optional[str] = None
    original_voucher: Optional[Voucher] = field(default=None, repr=False)

    _amount: Optional[float] = field(default=None, repr=False)

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "OrderDraft":
        """Blank draft: expires VOUCHER_EXPIRY_DAYS from now, with a preview code"""
        now = now or datetime.now(timezone.utc)
        return cls(
            expiration_date=as_utc(now) + timedelta(days=settings.VOUCHER_EXPIRY_DAYS),
            preview_code=generate_voucher_code(),
        )

    @classmethod
    def from_order(cls, order: Order) -> "OrderDraft":
        """Draft for editing an existing order; keeps its expiration date and code"""
        voucher = order.voucher
        payment = order.payment_details
        return cls(
            customer_id=order.customer_id,
            store_id=voucher.store_id,
            product_id=voucher.product_id,
            payment_id=payment.payment_id,
            payment_status=payment.payment_status,
            provider=payment.provider,
            payment_email=payment.payment_email,
            sender_name=voucher.sender_name,
            sender_email=voucher.sender_email,
            receiver_name=voucher.receiver_name,
            receiver_email=voucher.receiver_email,
            message=voucher.message,
            template=normalize_template(voucher.template),
            expiration_date=voucher.expiration_date,
            preview_code=voucher.code,
            editing_order_id=order.id,
            original_voucher=voucher,
            _amount=payment.amount,
        )

    @property
    def amount(self) -> Optional[float]:
        """Derived from the selected product's price; there is no setter"""
        return self._amount

    @property
    def is_editing(self) -> bool:
        return self.editing_order_id is not None

    def select_customer(self, customer_id: Optional[str]) -> None:
        self.customer_id = customer_id

    def select_store(self, store_id: Optional[str]) -> None:
        """Change store. Products and prices of another store do not carry over."""
        if store_id == self.store_id:
            return
        self.store_id = store_id
        self.product_id = None
        self.products = []
        self.product_load_error = None
        self._amount = None

    def set_products(self, products: List[Product]) -> None:
        """Products loaded for the selected store"""
        self.products = list(products)
        self.product_load_error = None
        if self.product_id and self._amount is None:
            current = self._find_product(self.product_id)
            if current is not None:
                self._amount = current.price

    def fail_product_load(self, message: str) -> None:
        """Products could not be loaded: nothing can be priced until they are"""
        self.products = []
        self.product_load_error = message
        self.product_id = None
        self._amount = None

    def select_product(self, product: Union[Product, str, None]) -> None:
        """Select a product and re-derive the amount from its price"""
        self._amount = None
        self.product_id = None
        if product is None:
            return

        if isinstance(product, str):
            found = self._find_product(product)
            if found is None:
                raise ValidationError(
                    f"Product {product} is not available for this store",
                    fields={"product": "Please select a product of the selected store"},
                )
            product = found

        if self.store_id and product.store_id != self.store_id:
            raise ValidationError(
                f"Product {product.id} belongs to another store",
                fields={"product": "Please select a product of the selected store"},
            )

        self.product_id = product.id
        self._amount = product.price

    def set_template(self, value: Union[str, VoucherTemplate, None]) -> None:
        self.template = normalize_template(value)

    def set_expiration_date(self, value: Union[datetime, str, None]) -> None:
        """Change the expiry; a redeemed or expired voucher being edited keeps its date"""
        if value is None:
            return
        if self.original_voucher is not None:
            ensure_expiration_change_allowed(self.original_voucher, value)
        self.expiration_date = as_utc(value)

    def _find_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def validate(self) -> Dict[str, str]:
        """Per-field error messages; empty when the draft can be submitted"""
        errors: Dict[str, str] = {}

        if not self.customer_id:
            errors["customer"] = "Please select a customer"
        if not self.store_id:
            errors["store"] = "Please select a store"
        if self.product_load_error:
            errors["product"] = f"Products could not be loaded: {self.product_load_error}"
        elif not self.product_id:
            errors["product"] = "Please select a product"
        if self._amount is None:
            errors["amount"] = "Please select a product to set the amount"

        if not self.payment_id.strip():
            errors["payment_id"] = "Please enter the payment ID"
        if self.provider is None:
            errors["provider"] = "Please select a provider"
        if not self.payment_email.strip():
            errors["payment_email"] = "Please enter the payment email"
        elif not is_valid_email(self.payment_email):
            errors["payment_email"] = "Please enter a valid email"

        if self.expiration_date is None:
            errors["expiration_date"] = "Please select an expiration date"

        if not self.sender_name.strip():
            errors["sender_name"] = "Please enter the sender name"
        if not is_valid_email(self.sender_email):
            errors["sender_email"] = "Please enter a valid sender email"
        if not self.receiver_name.strip():
            errors["receiver_name"] = "Please enter the receiver name"
        if not is_valid_email(self.receiver_email):
            errors["receiver_email"] = "Please enter a valid receiver email"
        if not self.message.strip():
            errors["message"] = "Please enter a message"

        return errors

    def assemble(self) -> OrderFormData:
        """The payload for POST /orders or PUT /orders/{id}"""
        errors = self.validate()
        if errors:
            raise ValidationError("Order form is incomplete", fields=errors)

        return OrderFormData(
            customer_id=self.customer_id,
            payment_details=OrderPaymentFormData(
                payment_id=self.payment_id.strip(),
                payment_status=self.payment_status,
                payment_email=self.payment_email.strip(),
                amount=self._amount,
                provider=self.provider,
            ),
            voucher=OrderVoucherFormData(
                store_id=self.store_id,
                product_id=self.product_id,
                expiration_date=self.expiration_date.isoformat(),
                code=self.preview_code,
                sender_name=self.sender_name.strip(),
                sender_email=self.sender_email.strip(),
                receiver_name=self.receiver_name.strip(),
                receiver_email=self.receiver_email.strip(),
                message=self.message,
                template=self.template,
            ),
        )


@dataclass
class CodeReconciliation:
    """
    Outcome of comparing the preview code with the code the platform issued.

    The issued code is the one to show from now on. `mismatch` is set when the
    platform replaced the preview code, so the caller can tell the admin that
    any preview they shared is no longer valid.
    """

    preview_code: Optional[str]
    issued_code: str
    redemption_link: str
    qr_source: str
    mismatch: bool


@dataclass
class OrderResult:
    order: Order
    reconciliation: CodeReconciliation


def reconcile_code(preview_code: Optional[str], order: Order) -> CodeReconciliation:
    issued = order.voucher.code
    mismatch = bool(preview_code) and preview_code != issued
    if mismatch:
        logger.warning(f"Platform issued voucher code {issued} instead of preview code {preview_code}")
    return CodeReconciliation(
        preview_code=preview_code,
        issued_code=issued,
        redemption_link=build_redemption_link(issued),
        qr_source=build_qr_source(issued, order.voucher.qr_code),
        mismatch=mismatch,
    )


class OrderVoucherAssembler:
    def __init__(
        self,
        store_repo: StoreRepository,
        product_repo: ProductRepository,
        customer_repo: CustomerRepository,
        order_repo: OrderRepository,
    ):
        self.store_repo = store_repo
        self.product_repo = product_repo
        self.customer_repo = customer_repo
        self.order_repo = order_repo

    async def load_products(self, draft: OrderDraft) -> List[Product]:
        """Load the selected store's products into the draft. A failure leaves an empty list and blocks submit."""
        if not draft.store_id:
            draft.set_products([])
            return []
        try:
            products = await self.product_repo.get_by_store(draft.store_id)
        except AdminError as e:
            logger.warning(f"Failed to load products for store {draft.store_id}: {e.message}")
            draft.fail_product_load(e.message)
            return []

        draft.set_products(products)
        return products

    async def _check_references(self, draft: OrderDraft) -> None:
        errors: Dict[str, str] = {}
        if draft.customer_id:
            try:
                await self.customer_repo.get_by_id(draft.customer_id)
            except NotFound:
                errors["customer"] = "Customer not found"
        if draft.store_id:
            try:
                await self.store_repo.get_by_id(draft.store_id)
            except NotFound:
                errors["store"] = "Store not found"
        if errors:
            raise ValidationError("Order references unknown records", fields=errors)

    async def create(self, draft: OrderDraft) -> OrderResult:
        form = draft.assemble()
        await self._check_references(draft)
        order = await self.order_repo.create_order(form)
        return OrderResult(order=order, reconciliation=reconcile_code(draft.preview_code, order))

    async def update(self, order_id: str, draft: OrderDraft) -> OrderResult:
        form = draft.assemble()
        await self._check_references(draft)
        order = await self.order_repo.update_order(order_id, form)
        return OrderResult(order=order, reconciliation=reconcile_code(draft.preview_code, order))
