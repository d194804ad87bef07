"""
Shopify Admin API clients.
"""

from shopify_app_auth.clients.graphql_client import GraphqlClient
from shopify_app_auth.clients.http_client import RequestReturn, ShopifyHttpClient

__all__ = ["GraphqlClient", "RequestReturn", "ShopifyHttpClient"]
