"""
Unit tests for shop domain validation and normalization.
"""

import pytest

from shopify_app_auth.auth.shop_validator import normalize_shop_domain, sanitize_shop
from shopify_app_auth.errors import InvalidShopError


class TestShopDomainNormalization:
    """Test that shop domain normalization is consistent."""

    @pytest.mark.parametrize("input_domain,expected", [
        ("store.myshopify.com", "store.myshopify.com"),
        ("Store.myshopify.com", "store.myshopify.com"),
        ("STORE.MYSHOPIFY.COM", "store.myshopify.com"),
        ("https://store.myshopify.com", "store.myshopify.com"),
        ("HTTP://Test-Store-123.MYSHOPIFY.COM//", "test-store-123.myshopify.com"),
        ("store.myshopify.com/", "store.myshopify.com"),
    ])
    def test_normalize(self, input_domain, expected):
        assert normalize_shop_domain(input_domain) == expected

    def test_normalize_empty(self):
        assert normalize_shop_domain("") == ""
        assert normalize_shop_domain(None) == ""


class TestSanitizeShop:
    """Test shop domain validation."""

    @pytest.mark.parametrize("shop", [
        "shop1.myshopify.io",
        "my-store.myshopify.com",
        "my_store.myshopify.com",
        "store.shopify.com",
        "https://store.myshopify.com/",
    ])
    def test_valid_shops(self, shop):
        assert sanitize_shop(shop) == normalize_shop_domain(shop)

    @pytest.mark.parametrize("shop", [
        "invalid-shop",
        "store.example.com",
        "-store.myshopify.com",
        "store.myshopify.com.evil.com",
        "store.myshopify.com/admin",
        "sto re.myshopify.com",
        "store.myshopify.com?x=1",
        "",
        None,
    ])
    def test_invalid_shops_return_none(self, shop):
        assert sanitize_shop(shop) is None

    def test_invalid_shop_raises_when_requested(self):
        with pytest.raises(InvalidShopError, match="invalid shop"):
            sanitize_shop("store.example.com", throw_on_invalid=True)

    def test_custom_shop_domains(self):
        assert sanitize_shop("store.example.com", custom_shop_domains=["example.com"]) == "store.example.com"

    def test_custom_domains_are_escaped(self):
        assert sanitize_shop("store.exampleXcom", custom_shop_domains=["example.com"]) is None
