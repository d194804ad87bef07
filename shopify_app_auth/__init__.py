"""
Shopify app authentication library.

OAuth install flow, session derivation and authenticated Admin API
clients for third-party Shopify apps.
"""

import logging

from shopify_app_auth.auth.oauth import CallbackResult, OAuthFlow
from shopify_app_auth.auth.scopes import AuthScopes
from shopify_app_auth.config import ShopifyConfig, load_config_from_env, validate_config
from shopify_app_auth.errors import (
    ConfigurationError,
    CookieNotFound,
    InvalidOAuthCallback,
    InvalidShopError,
    MissingRequiredArgument,
    PrivateAppError,
    ShopifyError,
    TokenExchangeError,
)
from shopify_app_auth.logger import configure_logging
from shopify_app_auth.session.session import Session
from shopify_app_auth.session.session_utils import AppMode, SessionIdentity
from shopify_app_auth.shopify_api import ShopifyApi, shopify_api
from shopify_app_auth.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AppMode",
    "AuthScopes",
    "CallbackResult",
    "ConfigurationError",
    "CookieNotFound",
    "InvalidOAuthCallback",
    "InvalidShopError",
    "MissingRequiredArgument",
    "OAuthFlow",
    "PrivateAppError",
    "Session",
    "SessionIdentity",
    "ShopifyApi",
    "ShopifyConfig",
    "ShopifyError",
    "TokenExchangeError",
    "__version__",
    "configure_logging",
    "load_config_from_env",
    "shopify_api",
    "validate_config",
]
