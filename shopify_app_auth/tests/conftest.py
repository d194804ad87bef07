"""
Root test configuration and fixtures.

Shared fixtures:
- make_config: Factory for ShopifyConfig with test defaults
- mock_shopify: MockShopifyServer signing callbacks and answering token exchanges
- http_client_factory: ShopifyHttpClient factory routed to the mock server
- oauth_flow / shopify: Library components wired to the mock server
"""

import os
from functools import partial
from typing import Callable

import pytest

from shopify_app_auth.auth.oauth import OAuthFlow
from shopify_app_auth.clients.http_client import ShopifyHttpClient
from shopify_app_auth.config import ShopifyConfig, validate_config
from shopify_app_auth.shopify_api import ShopifyApi, shopify_api
from shopify_app_auth.tests.mocks.browser import MockBrowser
from shopify_app_auth.tests.mocks.mock_shopify import MockShopifyServer

# Set test environment
os.environ.setdefault("ENV", "test")

TEST_API_KEY = "test-api-key"
TEST_API_SECRET = "test-api-secret"
TEST_SHOP = "shop1.myshopify.io"
TEST_HOST = "test.example.com"
TEST_CALLBACK_PATH = "/auth/callback"


@pytest.fixture
def make_config() -> Callable[..., ShopifyConfig]:
    """Factory for configs with test defaults; keyword arguments override."""
    def _make_config(**overrides) -> ShopifyConfig:
        params = {
            "api_key": TEST_API_KEY,
            "api_secret_key": TEST_API_SECRET,
            "scopes": "read_products",
            "host_name": TEST_HOST,
            "is_embedded_app": True,
        }
        params.update(overrides)
        return validate_config(**params)

    return _make_config


@pytest.fixture
def config(make_config) -> ShopifyConfig:
    return make_config()


@pytest.fixture
def mock_shopify() -> MockShopifyServer:
    return MockShopifyServer(api_secret=TEST_API_SECRET)


@pytest.fixture
def http_client_factory(mock_shopify) -> Callable[..., ShopifyHttpClient]:
    return partial(ShopifyHttpClient, transport=mock_shopify.get_mock_transport())


@pytest.fixture
def oauth_flow(config, http_client_factory) -> OAuthFlow:
    return OAuthFlow(config, http_client_factory=http_client_factory)


@pytest.fixture
def shopify(config, http_client_factory) -> ShopifyApi:
    return shopify_api(config=config, http_client_factory=http_client_factory)


@pytest.fixture
def browser() -> MockBrowser:
    return MockBrowser()


@pytest.fixture
def callback_params() -> Callable[..., dict]:
    """Unsigned callback query parameters for a state value."""
    def _callback_params(state: str, shop: str = TEST_SHOP, **extra) -> dict:
        params = {
            "code": "test-auth-code",
            "shop": shop,
            "state": state,
            "timestamp": "1234567890",
        }
        params.update(extra)
        return params

    return _callback_params
