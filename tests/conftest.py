from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx
import pytest

from voucher_admin.services.api_client import ApiClient, StaticCredentials
from voucher_admin.services.list_cache import list_cache

PLATFORM_URL = "http://platform.test/api/v1"
PLATFORM_PREFIX = "/api/v1"


class FakePlatform:
    """In-memory platform API served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response: Any) -> None:
        """Register a JSON body, an httpx.Response or a callable(request) for a path."""
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len(PLATFORM_PREFIX):]
        self.calls.append((request.method, path))
        self.requests.append(request)

        response = self.routes.get((request.method, path))
        if response is None:
            return httpx.Response(404, json={"message": f"{path} not found"})
        if callable(response):
            response = response(request)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def client(self, token: str | None = "admin-token") -> ApiClient:
        return ApiClient(
            StaticCredentials(token),
            base_url=PLATFORM_URL,
            api_key="test-key",
            transport=httpx.MockTransport(self.handler),
        )

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    def body(self, method: str, path: str) -> Any:
        """JSON body of the last request sent to a path."""
        for request in reversed(self.requests):
            if request.method == method and request.url.path == PLATFORM_PREFIX + path:
                return json.loads(request.content)
        raise AssertionError(f"no {method} {path} request was sent")


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@pytest.fixture(autouse=True)
def _clear_list_cache():
    list_cache.clear()
    yield
    list_cache.clear()


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture
def make_voucher() -> Callable[..., dict]:
    def _make(
        code: str = "GIFT2024",
        *,
        expires_in_days: int = 30,
        redeemed: bool = False,
        **overrides: Any,
    ) -> dict:
        now = datetime.now(timezone.utc)
        data = {
            "_id": f"v-{code}",
            "code": code,
            "status": "active",
            "isRedeemed": False,
            "expirationDate": _iso(now + timedelta(days=expires_in_days)),
            "storeId": "s1",
            "productId": "p1",
            "amount": 50,
            "qrCode": "",
            "senderName": "Ana",
            "senderEmail": "ana@example.com",
            "receiverName": "Ben",
            "receiverEmail": "ben@example.com",
            "message": "Enjoy your gift",
            "template": "template1",
        }
        if redeemed:
            data.update({"status": "redeemed", "isRedeemed": True, "redeemedAt": _iso(now - timedelta(hours=1))})
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def make_order(make_voucher) -> Callable[..., dict]:
    def _make(
        order_id: str = "o1",
        *,
        code: str = "GIFT2024",
        amount: float = 75,
        payment_status: str = "completed",
        **voucher_overrides: Any,
    ) -> dict:
        voucher = make_voucher(code, **voucher_overrides)
        voucher.pop("amount")
        return {
            "_id": order_id,
            "customerId": "c1",
            "paymentDetails": {
                "paymentId": "pay_1",
                "paymentStatus": payment_status,
                "provider": "stripe",
                "amount": amount,
                "paymentEmail": "buyer@example.com",
            },
            "voucher": voucher,
            "emailsSent": True,
            "pdfGenerated": False,
        }

    return _make


@pytest.fixture
def make_product() -> Callable[..., dict]:
    def _make(product_id: str = "p1", *, store_id: str = "s1", price: float = 50, **overrides: Any) -> dict:
        data = {
            "_id": product_id,
            "name": f"Product {product_id}",
            "description": "",
            "storeId": store_id,
            "price": price,
            "isActive": True,
        }
        data.update(overrides)
        return data

    return _make
