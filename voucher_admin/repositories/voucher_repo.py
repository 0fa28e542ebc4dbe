from typing import Any, List, Optional
from voucher_admin.models.voucher import Voucher
from voucher_admin.repositories.base_repo import PlatformRepository


def _embedded_voucher(raw: Any) -> Optional[dict]:
    """Find the voucher in a redemption response: {data}, {voucher}, {order: {voucher}} or bare"""
    if not isinstance(raw, dict):
        return None

    candidate = raw.get("data", raw)
    if isinstance(candidate, dict) and isinstance(candidate.get("voucher"), dict):
        candidate = candidate["voucher"]
    elif isinstance(raw.get("voucher"), dict):
        candidate = raw["voucher"]
    elif isinstance(raw.get("order"), dict) and isinstance(raw["order"].get("voucher"), dict):
        candidate = raw["order"]["voucher"]

    if isinstance(candidate, dict) and candidate.get("code"):
        return candidate
    return None


class VoucherRepository(PlatformRepository[Voucher]):
    resource = "vouchers"
    entity_key = "voucher"
    model = Voucher

    async def get_by_code(self, code: str) -> Voucher:
        raw = await self.client.get(f"/vouchers/code/{code}")
        return self.parse_entity(raw)

    async def get_by_store(self, store_id: str) -> List[Voucher]:
        return await self._list_all(f"/vouchers/store/{store_id}")

    async def get_by_customer(self, customer_id: str) -> List[Voucher]:
        return await self._list_all(f"/vouchers/customer/{customer_id}")

    async def redeem(self, code: str) -> Optional[Voucher]:
        """
        Ask the platform to redeem a voucher.

        Returns the updated voucher when the response carries one, None when
        the platform only acknowledged the redemption.
        """
        raw = await self.client.put(f"/vouchers/redeem/{code}")
        self.invalidate()
        # Orders embed their voucher, so their lists are stale too
        self.cache.invalidate("orders")

        voucher = _embedded_voucher(raw)
        return self.parse(voucher) if voucher is not None else None
