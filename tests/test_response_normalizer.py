from __future__ import annotations

import pytest

from voucher_admin.errors import MalformedResponse
from voucher_admin.services.response_normalizer import extract_entity, list_items, normalize_list


def test_status_envelope_with_pagination():
    raw = {
        "status": "success",
        "data": [{"id": "a"}, {"id": "b"}, {"id": "c"}],
        "pagination": {"page": 2, "limit": 3, "total": 7, "pages": 3},
    }

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert [item["id"] for item in envelope.items] == ["a", "b", "c"]
    assert (envelope.page, envelope.limit, envelope.total, envelope.pages) == (2, 3, 7, 3)


def test_data_with_pagination_recomputes_pages():
    raw = {"data": [{"id": "a"}], "pagination": {"page": 1, "limit": 10, "total": 21, "pages": 1}}

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert envelope.total == 21
    assert envelope.pages == 3


def test_pagination_missing_keys_fall_back_to_request():
    raw = {"data": [{"id": "a"}, {"id": "b"}], "pagination": {"page": "2"}}

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert (envelope.page, envelope.limit, envelope.total, envelope.pages) == (2, 10, 2, 1)


def test_bare_array():
    raw = [{"id": str(i)} for i in range(5)]

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert len(envelope.items) == 5
    assert (envelope.page, envelope.limit, envelope.total, envelope.pages) == (1, 10, 5, 1)


def test_bare_array_without_limit_has_no_pages():
    envelope = normalize_list([1, 2, 3], requested_page=1, requested_limit=0)

    assert envelope.total == 3
    assert envelope.pages == 0
    assert envelope.items == [1, 2, 3]


def test_data_without_pagination_gets_empty_pagination():
    raw = {"data": [{"id": "a"}, {"id": "b"}], "count": 2}

    envelope = normalize_list(raw, requested_page=3, requested_limit=5)

    assert len(envelope.items) == 2
    assert (envelope.page, envelope.limit, envelope.total, envelope.pages) == (3, 5, 0, 0)


def test_items_never_exceed_limit():
    raw = [{"id": str(i)} for i in range(12)]

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert len(envelope.items) == 10
    assert envelope.total == 12
    assert envelope.pages == 2


@pytest.mark.parametrize("raw", [{"items": []}, {"data": {"id": "a"}}, "oops", None, 42])
def test_unknown_shapes_are_malformed(raw):
    with pytest.raises(MalformedResponse) as exc_info:
        normalize_list(raw, requested_page=1, requested_limit=10)

    assert exc_info.value.payload == raw


def test_extract_entity_prefers_data_then_key_then_raw():
    assert extract_entity({"data": {"id": "1"}}, "voucher") == {"id": "1"}
    assert extract_entity({"voucher": {"id": "2"}}, "voucher") == {"id": "2"}
    assert extract_entity({"id": "3", "code": "X"}, "voucher") == {"id": "3", "code": "X"}


def test_extract_entity_rejects_non_objects():
    with pytest.raises(MalformedResponse):
        extract_entity({"data": ["not", "an", "object"]}, "voucher")
    with pytest.raises(MalformedResponse):
        extract_entity("plain text")


def test_single_voucher_page():
    raw = {"status": "success", "data": [{"id": "v1"}], "pagination": {"page": 1, "limit": 10, "total": 1, "pages": 1}}

    envelope = normalize_list(raw, requested_page=1, requested_limit=10)

    assert envelope.model_dump() == {"items": [{"id": "v1"}], "page": 1, "limit": 10, "total": 1, "pages": 1}


def test_two_item_bare_array():
    envelope = normalize_list([{"id": "v1"}, {"id": "v2"}], requested_page=1, requested_limit=10)

    assert envelope.model_dump() == {"items": [{"id": "v1"}, {"id": "v2"}], "page": 1, "limit": 10, "total": 2, "pages": 1}


def test_bare_array_is_paged():
    raw = [{"id": f"v{i}"} for i in range(1, 16)]

    envelope = normalize_list(raw, requested_page=2, requested_limit=10)

    assert [item["id"] for item in envelope.items] == ["v11", "v12", "v13", "v14", "v15"]
    assert (envelope.page, envelope.limit, envelope.total, envelope.pages) == (2, 10, 15, 2)


def test_bare_array_page_past_the_end_is_empty():
    envelope = normalize_list([{"id": "a"}], requested_page=3, requested_limit=10)

    assert envelope.items == []
    assert envelope.total == 1


def test_list_items_ignores_pagination_limit():
    raw = {"data": [{"id": str(i)} for i in range(15)], "pagination": {"page": 1, "limit": 10, "total": 15}}

    assert len(list_items(raw)) == 15
    assert list_items([1, 2, 3]) == [1, 2, 3]


@pytest.mark.parametrize("raw", [{"items": []}, {"data": {"id": "a"}}, "oops", None])
def test_list_items_rejects_unknown_shapes(raw):
    with pytest.raises(MalformedResponse):
        list_items(raw)


def test_extract_entity_from_order_wrapper():
    raw = {"success": True, "order": {"_id": "o1", "voucher": {"code": "GIFT2024"}}}

    assert extract_entity(raw, "voucher") == {"code": "GIFT2024"}
