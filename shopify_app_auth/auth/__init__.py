"""
OAuth flow and request verification.
"""

from shopify_app_auth.auth.hmac_validator import validate_hmac
from shopify_app_auth.auth.nonce import NonceGenerator, nonce
from shopify_app_auth.auth.oauth import CallbackResult, OAuthFlow
from shopify_app_auth.auth.safe_compare import safe_compare
from shopify_app_auth.auth.shop_validator import sanitize_shop

__all__ = [
    "CallbackResult",
    "NonceGenerator",
    "OAuthFlow",
    "nonce",
    "safe_compare",
    "sanitize_shop",
    "validate_hmac",
]
