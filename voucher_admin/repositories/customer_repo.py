from voucher_admin.models.customer import Customer
from voucher_admin.repositories.base_repo import PlatformRepository


class CustomerRepository(PlatformRepository[Customer]):
    resource = "customers"
    entity_key = "customer"
    model = Customer
