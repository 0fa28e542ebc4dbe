from typing import List
from voucher_admin.models.product import Product
from voucher_admin.repositories.base_repo import PlatformRepository


class ProductRepository(PlatformRepository[Product]):
    resource = "products"
    entity_key = "product"
    model = Product

    async def get_by_store(self, store_id: str) -> List[Product]:
        """All products of a store (used to price vouchers)"""
        return await self._list_all(f"/products/store/{store_id}")
