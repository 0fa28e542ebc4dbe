from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from voucher_admin.errors import ApiError, AuthenticationError, NetworkError, NotFound, ValidationError
from voucher_admin.services.api_client import ApiClient, StaticCredentials

BASE_URL = "http://platform.test/api/v1"


def _client(handler, token: str | None = "tok", api_key: str | None = "key") -> ApiClient:
    return ApiClient(
        StaticCredentials(token),
        base_url=BASE_URL,
        api_key=api_key,
        transport=httpx.MockTransport(handler),
    )


def test_sends_credentials_and_drops_empty_params():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": []})

    result = asyncio.run(_client(handler).get("/vouchers", params={"page": 2, "limit": 10, "sort": None}))

    request = seen[0]
    assert result == {"data": []}
    assert request.url.path == "/api/v1/vouchers"
    assert dict(request.url.params) == {"page": "2", "limit": "10"}
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["X-API-Key"] == "key"


def test_token_is_read_at_call_time():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    credentials = StaticCredentials(None)
    client = ApiClient(credentials, base_url=BASE_URL, api_key="", transport=httpx.MockTransport(handler))

    asyncio.run(client.get("/auth/me"))
    credentials.token = "fresh"
    asyncio.run(client.get("/auth/me"))

    assert "Authorization" not in seen[0].headers
    assert "X-API-Key" not in seen[0].headers
    assert seen[1].headers["Authorization"] == "Bearer fresh"


def test_empty_body_returns_none():
    client = _client(lambda request: httpx.Response(204))

    assert asyncio.run(client.delete("/vouchers/v1")) is None


def test_post_sends_json_body():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"data": {"id": "x"}})

    asyncio.run(_client(handler).post("/customers", json={"fullName": "Ana"}))

    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"fullName": "Ana"}


@pytest.mark.parametrize(
    "status_code, error_type",
    [(404, NotFound), (401, AuthenticationError), (400, ValidationError), (422, ValidationError)],
)
def test_error_statuses_map_to_error_kinds(status_code, error_type):
    client = _client(lambda request: httpx.Response(status_code, json={"message": "Nope"}))

    with pytest.raises(error_type) as exc_info:
        asyncio.run(client.get("/vouchers/code/X"))

    assert exc_info.value.message == "Nope"


def test_validation_error_carries_platform_fields():
    payload = {"message": "Invalid order", "errors": {"customerId": "Required"}}
    client = _client(lambda request: httpx.Response(400, json=payload))

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(client.post("/orders", json={}))

    assert exc_info.value.fields == {"customerId": "Required"}


def test_other_statuses_keep_their_code():
    client = _client(lambda request: httpx.Response(409, json={"error": "Voucher already redeemed"}))

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(client.put("/vouchers/redeem/X"))

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "Voucher already redeemed"


def test_non_json_error_uses_text():
    client = _client(lambda request: httpx.Response(502, text="Bad gateway"))

    with pytest.raises(ApiError) as exc_info:
        asyncio.run(client.get("/stores"))

    assert exc_info.value.message == "Bad gateway"


def test_no_response_is_a_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(_client(handler).get("/stores"))

    assert exc_info.value.message == "No response received from server. Please check your network connection."
