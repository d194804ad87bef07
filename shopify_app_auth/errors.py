"""
Exception hierarchy for the Shopify app auth library.

Every error raised by the library derives from ShopifyError so host
applications can catch library failures in one place. All errors are
terminal for the current request: nothing is retried internally, and a
failed OAuth callback is recovered by starting the flow again.
"""

from typing import Any, List, Optional, Tuple


class ShopifyError(Exception):
    """
    Base exception for all library errors.

    ``headers`` holds response headers the caller must still send, such as
    the Set-Cookie that clears a consumed OAuth state cookie.
    """

    def __init__(self, *args: Any, headers: Optional[List[Tuple[str, str]]] = None):
        super().__init__(*args)
        self.headers: List[Tuple[str, str]] = list(headers or [])


class ConfigurationError(ShopifyError):
    """Raised when the library configuration is missing or invalid."""
    pass


class PrivateAppError(ConfigurationError):
    """Raised when a private app attempts an operation that requires OAuth."""
    pass


class MissingRequiredArgument(ShopifyError):
    """Raised when a required argument or request field is absent."""
    pass


class InvalidShopError(ShopifyError):
    """Raised when a shop domain does not match the platform's domain syntax."""
    pass


class CookieNotFound(ShopifyError):
    """
    Raised when the OAuth state cookie is missing.

    Expired, replayed and forged cookies all surface as this error; the
    cause is intentionally not distinguished.
    """
    pass


class InvalidOAuthCallback(ShopifyError):
    """Raised when the callback HMAC or state does not match."""
    pass


class TokenExchangeError(ShopifyError):
    """Raised when exchanging the authorization code for a token fails."""
    pass


class SafeCompareError(ShopifyError):
    """Raised when values of different types are compared."""
    pass


class InvalidJwtError(ShopifyError):
    """Raised when a session token fails verification."""
    pass


class MissingJwtTokenError(ShopifyError):
    """Raised when the Authorization header does not carry a Bearer token."""
    pass


class FeatureDeprecatedError(ShopifyError):
    """Raised when a deprecated feature is used past its removal version."""
    pass


class HttpRequestError(ShopifyError):
    """Raised when an outbound request could not be completed."""
    pass


class HttpResponseError(ShopifyError):
    """Raised when Shopify answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GraphqlQueryError(ShopifyError):
    """Raised when a GraphQL response contains errors."""

    def __init__(self, message: str, response: Optional[dict] = None):
        super().__init__(message)
        self.response = response
