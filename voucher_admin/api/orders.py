import logging
from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from voucher_admin.config import settings
from voucher_admin.middleware.auth import get_api_client, require_staff
from voucher_admin.models.order import Order
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.models.user import User
from voucher_admin.repositories.customer_repo import CustomerRepository
from voucher_admin.repositories.order_repo import OrderRepository
from voucher_admin.repositories.product_repo import ProductRepository
from voucher_admin.repositories.store_repo import StoreRepository
from voucher_admin.schemas.common import MessageResponse
from voucher_admin.schemas.order import (
    OrderResultResponse, OrderSelection, OrderView, PdfResponse, PreviewCodeResponse,
    ReconciliationView, ResendEmailRequest
)
from voucher_admin.services.api_client import ApiClient
from voucher_admin.services.order_assembler import OrderDraft, OrderResult, OrderVoucherAssembler
from voucher_admin.utils.helpers import build_qr_source, build_redemption_link
from voucher_admin.utils.security import generate_voucher_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/orders", tags=["Orders"])


def _assembler(client: ApiClient) -> OrderVoucherAssembler:
    return OrderVoucherAssembler(
        store_repo=StoreRepository(client),
        product_repo=ProductRepository(client),
        customer_repo=CustomerRepository(client),
        order_repo=OrderRepository(client),
    )


async def _apply_selection(
    assembler: OrderVoucherAssembler, draft: OrderDraft, selection: OrderSelection
) -> None:
    """Replay the admin's selection on a draft, in the order the form enforces"""
    if selection.customer_id is not None:
        draft.select_customer(selection.customer_id)
    if selection.store_id is not None:
        draft.select_store(selection.store_id)

    await assembler.load_products(draft)

    product_id = selection.product_id or draft.product_id
    if draft.store_id and draft.product_load_error is None and product_id != draft.product_id:
        draft.select_product(product_id)

    payment = selection.payment
    draft.payment_id = payment.payment_id
    draft.payment_status = payment.payment_status
    draft.provider = payment.provider
    draft.payment_email = payment.payment_email

    if selection.gift is not None:
        for name, value in selection.gift.model_dump(exclude_none=True).items():
            setattr(draft, name, value)

    if selection.template is not None:
        draft.set_template(selection.template)
    draft.set_expiration_date(selection.expiration_date)


def _result_response(result: OrderResult) -> OrderResultResponse:
    return OrderResultResponse(
        order=OrderView.build(result.order),
        reconciliation=ReconciliationView.build(result.reconciliation),
    )


@router.get("", response_model=PaginatedList[Order])
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Optional[str] = None,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """List orders"""
    return await OrderRepository(client).get_all(page=page, limit=limit, sort=sort)


@router.get("/preview-code", response_model=PreviewCodeResponse)
async def preview_code(current_user: User = Depends(require_staff)):
    """
    Suggest a voucher code for a new order form.

    Only a preview: the platform issues the final code when the order is
    created.
    """
    code = generate_voucher_code()
    return PreviewCodeResponse(
        code=code,
        redemption_link=build_redemption_link(code),
        qr_source=build_qr_source(code),
    )


@router.get("/voucher/{code}", response_model=OrderView)
async def get_order_by_voucher_code(
    code: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    order = await OrderRepository(client).get_by_voucher_code(code)
    return OrderView.build(order)


@router.get("/customer/{customer_id}", response_model=PaginatedList[Order])
async def list_customer_orders(
    customer_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    return await OrderRepository(client).get_by_customer(customer_id, page=page, limit=limit)


@router.get("/store/{store_id}", response_model=PaginatedList[Order])
async def list_store_orders(
    store_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    return await OrderRepository(client).get_by_store(store_id, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderView)
async def get_order(
    order_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Get order by ID"""
    order = await OrderRepository(client).get_by_id(order_id)
    return OrderView.build(order)


@router.post("", response_model=OrderResultResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    selection: OrderSelection,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """
    Create an order and the voucher it issues.

    The response reports the code the platform actually issued and whether it
    differs from the preview code.
    """
    assembler = _assembler(client)
    draft = OrderDraft.new()
    if selection.preview_code:
        draft.preview_code = selection.preview_code

    await _apply_selection(assembler, draft, selection)
    result = await assembler.create(draft)
    logger.info(f"Order {result.order.id} created by {current_user.email} with voucher {result.reconciliation.issued_code}")
    return _result_response(result)


@router.put("/{order_id}", response_model=OrderResultResponse)
async def update_order(
    order_id: str,
    selection: OrderSelection,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Update an order; the amount is kept unless the product changes"""
    assembler = _assembler(client)
    order = await assembler.order_repo.get_by_id(order_id)
    draft = OrderDraft.from_order(order)

    await _apply_selection(assembler, draft, selection)
    result = await assembler.update(order_id, draft)
    return _result_response(result)


@router.delete("/{order_id}", response_model=MessageResponse)
async def delete_order(
    order_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Delete order"""
    repo = OrderRepository(client)
    await repo.delete(order_id)
    # The order's voucher goes with it
    repo.cache.invalidate("vouchers")
    return {"message": "Order deleted successfully"}


@router.post("/{order_id}/emails", response_model=MessageResponse)
async def resend_order_emails(
    order_id: str,
    request: ResendEmailRequest,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """Resend the order emails to the customer, the receiver, the store or all of them"""
    await OrderRepository(client).resend_emails(order_id, request.target)
    return {"message": f"Emails sent to {request.target}"}


@router.get("/{order_id}/pdf", response_model=PdfResponse)
async def get_order_pdf(
    order_id: str,
    current_user: User = Depends(require_staff),
    client: ApiClient = Depends(get_api_client),
):
    """URL of the voucher PDF"""
    url = await OrderRepository(client).get_pdf_url(order_id)
    return PdfResponse(url=url)
