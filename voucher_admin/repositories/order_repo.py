from typing import Any, Optional
from voucher_admin.errors import MalformedResponse, ValidationError
from voucher_admin.models.order import Order, OrderFormData
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.repositories.base_repo import PlatformRepository

EMAIL_TARGETS = ("customer", "receiver", "store", "all")


def _pdf_url(raw: Any) -> Optional[str]:
    if isinstance(raw, str):
        return raw.strip() or None
    if not isinstance(raw, dict):
        return None

    data = raw.get("data")
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and data.get("url"):
        return data["url"]
    return raw.get("url") or raw.get("pdfUrl")


class OrderRepository(PlatformRepository[Order]):
    resource = "orders"
    entity_key = "order"
    model = Order

    async def get_by_voucher_code(self, code: str) -> Order:
        raw = await self.client.get(f"/orders/voucher/{code}")
        return self.parse_entity(raw)

    async def get_by_customer(self, customer_id: str, page: int = 1, limit: Optional[int] = None) -> PaginatedList:
        return await self._list(f"/orders/customer/{customer_id}", page=page, limit=limit)

    async def get_by_store(self, store_id: str, page: int = 1, limit: Optional[int] = None) -> PaginatedList:
        return await self._list(f"/orders/store/{store_id}", page=page, limit=limit)

    async def create_order(self, form: OrderFormData) -> Order:
        order = await self.create(form.to_payload())
        # Orders issue vouchers
        self.cache.invalidate("vouchers")
        return order

    async def update_order(self, order_id: str, form: OrderFormData) -> Order:
        order = await self.update(order_id, form.to_payload())
        self.cache.invalidate("vouchers")
        return order

    async def resend_emails(self, order_id: str, target: str = "all") -> None:
        """Ask the platform to resend order emails (customer, receiver, store or all)"""
        if target not in EMAIL_TARGETS:
            raise ValidationError(f"Unknown email target: {target}", fields={"target": "Must be one of customer, receiver, store, all"})
        await self.client.post(f"/orders/{order_id}/emails/{target}")

    async def get_pdf_url(self, order_id: str) -> str:
        """URL of the rendered voucher PDF"""
        raw = await self.client.get(f"/orders/{order_id}/pdf")
        url = _pdf_url(raw)
        if not url:
            raise MalformedResponse(f"Invalid PDF response for order {order_id}", payload=raw)
        return url
