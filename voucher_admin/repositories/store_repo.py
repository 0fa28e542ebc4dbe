from voucher_admin.models.store import Store
from voucher_admin.repositories.base_repo import PlatformRepository


class StoreRepository(PlatformRepository[Store]):
    resource = "stores"
    entity_key = "store"
    model = Store
