"""
Library entry point.

Usage:
    shopify = shopify_api(
        api_key="...",
        api_secret_key="...",
        scopes="read_products",
        host_name="my-app.example.com",
    )
    response = shopify.auth.begin(shop="mystore.myshopify.com", callback_path="/auth/callback", is_online=False)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from shopify_app_auth.auth.oauth import OAuthFlow
from shopify_app_auth.clients.graphql_client import GraphqlClient
from shopify_app_auth.clients.http_client import ShopifyHttpClient
from shopify_app_auth.config import ShopifyConfig, validate_config
from shopify_app_auth.logger import PACKAGE_LOGGER_NAME
from shopify_app_auth.session.session import Session
from shopify_app_auth.session.session_utils import SessionIdentity

logger = logging.getLogger(__name__)


@dataclass
class ShopifyApi:
    """Configured library components sharing one configuration."""
    config: ShopifyConfig
    auth: OAuthFlow
    session: SessionIdentity
    http_client_factory: Callable[..., ShopifyHttpClient]

    def graphql_client(self, session: Session) -> GraphqlClient:
        return GraphqlClient(self.config, session, http_client_factory=self.http_client_factory)


def shopify_api(
    config: Optional[ShopifyConfig] = None,
    cookie_keys: Optional[Sequence[str]] = None,
    http_client_factory: Optional[Callable[..., ShopifyHttpClient]] = None,
    **params: Any
) -> ShopifyApi:
    """
    Build the library components.

    Args:
        config: A ready configuration; otherwise built from ``params``
        cookie_keys: Cookie signing keys, primary first
        http_client_factory: Client factory used for outbound calls

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if config is None:
        config = validate_config(**params)

    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(config.log_level)

    http_client_factory = http_client_factory or ShopifyHttpClient

    logger.info("Initialized Shopify API library", extra={
        "host_name": config.host_name,
        "api_version": config.api_version,
        "is_embedded_app": config.is_embedded_app,
        "is_private_app": config.is_private_app
    })

    return ShopifyApi(
        config=config,
        auth=OAuthFlow(config, cookie_keys=cookie_keys, http_client_factory=http_client_factory),
        session=SessionIdentity(config, cookie_keys=cookie_keys),
        http_client_factory=http_client_factory,
    )
