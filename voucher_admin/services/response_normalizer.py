"""
Reduce the platform's list payloads to one envelope.

List endpoints are not shaped alike across resources. Accepted shapes, tried
in order:

1. {"status": "success", "data": [...], "pagination": {...}}
2. {"data": [...], "pagination": {...}}
3. [...]
4. {"data": [...], ...} without a pagination object
"""

import logging
import math
from typing import Any, Optional
from voucher_admin.errors import MalformedResponse
from voucher_admin.models.pagination import PaginatedList

logger = logging.getLogger(__name__)


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return default


def _page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def _envelope(items: list, page: int, limit: int, total: int) -> PaginatedList:
    if limit > 0 and len(items) > limit:
        logger.warning(f"List payload returned {len(items)} items for limit {limit}, truncating")
        items = items[:limit]
    return PaginatedList(
        items=items,
        page=page,
        limit=limit,
        total=total,
        pages=_page_count(total, limit),
    )


def normalize_list(raw: Any, requested_page: int, requested_limit: int) -> PaginatedList:
    """Return the canonical {items, page, limit, total, pages} envelope for a list payload"""
    # Shapes 1 and 2: the status field makes no difference
    if isinstance(raw, dict) and isinstance(raw.get("data"), list) and isinstance(raw.get("pagination"), dict):
        items = raw["data"]
        pagination = raw["pagination"]
        page = _as_int(pagination.get("page"), requested_page)
        limit = _as_int(pagination.get("limit"), requested_limit)
        total = _as_int(pagination.get("total"), len(items))

        reported_pages = pagination.get("pages")
        if reported_pages is not None and _as_int(reported_pages, -1) != _page_count(total, limit):
            logger.warning(
                f"Pagination reports {reported_pages} pages for total={total} limit={limit}, recomputing"
            )
        return _envelope(items, page, limit, total)

    # Shape 3: bare array holding the whole collection, paged here
    if isinstance(raw, list):
        items = raw
        if requested_limit > 0:
            start = (max(requested_page, 1) - 1) * requested_limit
            items = raw[start:start + requested_limit]
        return _envelope(items, requested_page, requested_limit, len(raw))

    # Shape 4: data array without pagination
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        logger.warning("List payload has no pagination object, using empty pagination")
        return _envelope(raw["data"], requested_page, requested_limit, 0)

    logger.error(f"Malformed list payload: {raw!r}")
    raise MalformedResponse("Failed to load list: unexpected response format", payload=raw)


def list_items(raw: Any) -> list:
    """
    Every item of an unpaginated sub-collection (e.g. all products of a store).

    Accepts the same shapes as normalize_list but never cuts the list to a
    reported page size.
    """
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("data"), list):
        return raw["data"]

    logger.error(f"Malformed list payload: {raw!r}")
    raise MalformedResponse("Failed to load list: unexpected response format", payload=raw)


def extract_entity(raw: Any, key: Optional[str] = None) -> dict:
    """
    Pull a single resource out of a platform response.

    Tries `data`, then the resource key (e.g. `voucher`, `order`), then the
    resource nested in an order (`{"order": {"voucher": ...}}`), then the
    payload itself.
    """
    entity = raw
    if isinstance(raw, dict):
        order = raw.get("order")
        if raw.get("data") is not None:
            entity = raw["data"]
        elif key and raw.get(key) is not None:
            entity = raw[key]
        elif key and isinstance(order, dict) and order.get(key) is not None:
            entity = order[key]

    if not isinstance(entity, dict):
        logger.error(f"Malformed entity payload: {raw!r}")
        raise MalformedResponse("Unexpected response format", payload=raw)
    return entity
