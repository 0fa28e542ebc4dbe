from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest

from voucher_admin.config import settings
from voucher_admin.errors import ValidationError
from voucher_admin.models.template import DEFAULT_TEMPLATE, VoucherTemplate, normalize_template
from voucher_admin.utils.helpers import build_qr_source, build_redemption_link, format_currency, is_valid_email
from voucher_admin.utils.security import bearer_header, generate_voucher_code


def test_redemption_link_strips_trailing_slash():
    assert build_redemption_link("ABC123", "https://gifts.example.com/") == "https://gifts.example.com/vouchers/redeem/ABC123"
    assert build_redemption_link("ABC123", "https://gifts.example.com") == "https://gifts.example.com/vouchers/redeem/ABC123"


def test_redemption_link_defaults_to_app_url():
    assert build_redemption_link("XYZ").startswith(settings.APP_URL.rstrip("/"))


def test_qr_source_encodes_the_redemption_link():
    source = build_qr_source("ABC123", base_url="https://gifts.example.com")

    assert source.startswith(settings.QR_SERVICE_URL)
    query = parse_qs(urlparse(source).query)
    assert query["data"] == ["https://gifts.example.com/vouchers/redeem/ABC123"]
    assert query["size"] == [settings.QR_IMAGE_SIZE]


def test_qr_source_is_deterministic():
    assert build_qr_source("ABC123") == build_qr_source("ABC123")


def test_explicit_qr_url_wins():
    assert build_qr_source("ABC123", "https://cdn.example.com/qr/abc.png") == "https://cdn.example.com/qr/abc.png"


def test_voucher_code_shape():
    code = generate_voucher_code()

    assert len(code) == settings.VOUCHER_CODE_LENGTH
    assert all(ch in settings.VOUCHER_CODE_ALPHABET for ch in code)
    assert len(generate_voucher_code(12)) == 12


def test_bearer_header():
    assert bearer_header("tok") == {"Authorization": "Bearer tok"}
    assert bearer_header(None) == {}


@pytest.mark.parametrize("value", ["Template1", "template1", "TEMPLATE1", "Template 1", "1", "template01"])
def test_template_spellings(value):
    assert normalize_template(value) is VoucherTemplate.TEMPLATE1


@pytest.mark.parametrize("value", ["template3", "Template5", VoucherTemplate.TEMPLATE2, None, ""])
def test_template_normalization_is_idempotent(value):
    once = normalize_template(value)
    assert normalize_template(once) is once
    assert normalize_template(once.value) is once


def test_blank_template_uses_default():
    assert normalize_template(None) is DEFAULT_TEMPLATE
    assert normalize_template("  ") is DEFAULT_TEMPLATE


@pytest.mark.parametrize("value", ["Template9", "fancy", "template0"])
def test_unknown_template_is_rejected(value):
    with pytest.raises(ValidationError) as exc_info:
        normalize_template(value)

    assert "template" in exc_info.value.fields


def test_email_shape():
    assert is_valid_email("ana@example.com")
    assert not is_valid_email("ana@example")
    assert not is_valid_email("")
    assert not is_valid_email(None)


def test_format_currency():
    assert format_currency(1234.5) == "$ 1,234.50"
    assert format_currency(None) == "-"
