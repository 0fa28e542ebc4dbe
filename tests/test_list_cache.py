from __future__ import annotations

from voucher_admin.models.pagination import PaginatedList
from voucher_admin.services.list_cache import ListCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _envelope(total: int = 1) -> PaginatedList:
    return PaginatedList(items=[{"id": "a"}], page=1, limit=10, total=total, pages=1)


def test_fresh_entry_is_served():
    cache = ListCache(ttl_seconds=60, clock=FakeClock())
    key = ListCache.key("vouchers", 1, 10)
    envelope = _envelope()

    cache.put(key, envelope)

    assert cache.get(key) is envelope


def test_entry_goes_stale_after_ttl():
    clock = FakeClock()
    cache = ListCache(ttl_seconds=60, clock=clock)
    key = ListCache.key("vouchers", 1, 10)
    cache.put(key, _envelope())

    clock.now += 59
    assert cache.get(key) is not None
    clock.now += 1
    assert cache.get(key) is None


def test_invalidate_drops_only_that_resource():
    cache = ListCache(ttl_seconds=60, clock=FakeClock())
    cache.put(ListCache.key("vouchers", 1, 10), _envelope())
    cache.put(ListCache.key("vouchers", 2, 10, sort="-createdAt"), _envelope())
    cache.put(ListCache.key("orders", 1, 10), _envelope())

    assert cache.invalidate("vouchers") == 2
    assert cache.get(ListCache.key("vouchers", 1, 10)) is None
    assert cache.get(ListCache.key("orders", 1, 10)) is not None


def test_keys_differ_by_scope_and_viewer():
    base = ListCache.key("orders", 1, 10)

    assert ListCache.key("orders", 1, 10, scope="/orders/store/s1") != base
    assert ListCache.key("orders", 1, 10, viewer="abc") != ListCache.key("orders", 1, 10, viewer="def")


def test_stale_entries_are_evicted_on_put():
    clock = FakeClock()
    cache = ListCache(ttl_seconds=60, clock=clock)
    for page in range(1, 1001):
        cache.put(ListCache.key("vouchers", page, 10), _envelope())
    assert len(cache) == 1000

    clock.now += 3600
    cache.put(ListCache.key("orders", 1, 10), _envelope())

    assert len(cache) == 1
