from voucher_admin.models.user import User
from voucher_admin.repositories.base_repo import PlatformRepository


class UserRepository(PlatformRepository[User]):
    resource = "users"
    entity_key = "user"
    model = User

    async def get_current(self) -> User:
        """Current user as reported by the auth collaborator"""
        raw = await self.client.get("/auth/me")
        return self.parse_entity(raw)
