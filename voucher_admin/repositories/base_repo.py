import hashlib
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar
from pydantic import ValidationError as PydanticValidationError
from voucher_admin.config import settings
from voucher_admin.errors import MalformedResponse
from voucher_admin.models.base import PlatformModel
from voucher_admin.models.pagination import PaginatedList
from voucher_admin.services.api_client import ApiClient
from voucher_admin.services.list_cache import ListCache, list_cache
from voucher_admin.services.response_normalizer import extract_entity, list_items, normalize_list

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PlatformModel)


class PlatformRepository(Generic[M]):
    """
    CRUD access to one platform resource.

    Lists always come back as the normalized envelope and are served from the
    list cache while fresh. Successful mutations invalidate the resource's
    cached lists; failed ones leave the cache alone.
    """

    resource: str = ""
    entity_key: str = ""
    model: Type[M]

    def __init__(self, client: ApiClient, cache: Optional[ListCache] = None):
        self.client = client
        self.cache = cache if cache is not None else list_cache

    def _viewer(self) -> Optional[str]:
        token = self.client.credentials.get_token()
        if not token:
            return None
        return hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]

    def parse(self, data: Any) -> M:
        try:
            return self.model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Invalid {self.entity_key} payload: {e}")
            raise MalformedResponse(f"Unexpected {self.entity_key} format", payload=data)

    def parse_entity(self, raw: Any) -> M:
        return self.parse(extract_entity(raw, self.entity_key))

    async def _list(
        self,
        path: str,
        page: int = 1,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
    ) -> PaginatedList:
        limit = limit or settings.DEFAULT_PAGE_SIZE
        key = ListCache.key(self.resource, page, limit, sort, scope=path, viewer=self._viewer())
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        raw = await self.client.get(path, params={"page": page, "limit": limit, "sort": sort})
        envelope = normalize_list(raw, page, limit)
        envelope = envelope.model_copy(update={"items": [self.parse(item) for item in envelope.items]})
        self.cache.put(key, envelope)
        return envelope

    async def _list_all(self, path: str) -> List[M]:
        """Unpaginated sub-collection (e.g. all vouchers of a store)"""
        raw = await self.client.get(path)
        return [self.parse(item) for item in list_items(raw)]

    async def get_all(self, page: int = 1, limit: Optional[int] = None, sort: Optional[str] = None) -> PaginatedList:
        return await self._list(f"/{self.resource}", page=page, limit=limit, sort=sort)

    async def get_by_id(self, entity_id: str) -> M:
        raw = await self.client.get(f"/{self.resource}/{entity_id}")
        return self.parse_entity(raw)

    async def create(self, payload: dict) -> M:
        raw = await self.client.post(f"/{self.resource}", json=payload)
        self.invalidate()
        return self.parse_entity(raw)

    async def update(self, entity_id: str, payload: dict) -> M:
        raw = await self.client.put(f"/{self.resource}/{entity_id}", json=payload)
        self.invalidate()
        return self.parse_entity(raw)

    async def delete(self, entity_id: str) -> None:
        await self.client.delete(f"/{self.resource}/{entity_id}")
        self.invalidate()

    def invalidate(self) -> None:
        self.cache.invalidate(self.resource)
