"""
GraphQL Admin API client bound to a session.

Documentation: https://shopify.dev/docs/api/admin-graphql
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from shopify_app_auth.clients.http_client import RequestReturn, ShopifyHttpClient
from shopify_app_auth.config import ShopifyConfig
from shopify_app_auth.errors import GraphqlQueryError, MissingRequiredArgument
from shopify_app_auth.session.session import Session

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"

HttpClientFactory = Callable[..., ShopifyHttpClient]


class GraphqlClient:
    """Runs GraphQL queries against one shop on a session's behalf."""

    base_api_path = "/admin/api"

    def __init__(
        self,
        config: ShopifyConfig,
        session: Session,
        http_client_factory: HttpClientFactory = ShopifyHttpClient
    ):
        if not config.is_private_app and not session.access_token:
            raise MissingRequiredArgument("Missing access token when creating GraphQL client")

        self.config = config
        self.session = session
        self.http_client_factory = http_client_factory

    @property
    def graphql_path(self) -> str:
        return f"{self.base_api_path}/{self.config.api_version}/graphql.json"

    def access_token(self) -> str:
        # Private apps authenticate with the API secret instead of a token
        if self.config.is_private_app:
            return self.config.api_secret_key
        return self.session.access_token

    async def query(
        self,
        data: Union[str, Dict[str, Any]],
        variables: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None
    ) -> RequestReturn:
        """
        Execute a GraphQL query or mutation.

        Args:
            data: Query string, or a full {"query": ..., "variables": ...} payload
            variables: Query variables when ``data`` is a string
            extra_headers: Additional request headers

        Returns:
            RequestReturn whose body is the GraphQL response

        Raises:
            MissingRequiredArgument: If the query is empty
            GraphqlQueryError: If the response contains GraphQL errors
        """
        if not data:
            raise MissingRequiredArgument("Query missing.")

        if isinstance(data, str):
            payload: Dict[str, Any] = {"query": data}
            if variables:
                payload["variables"] = variables
        else:
            payload = data

        headers = {ACCESS_TOKEN_HEADER: self.access_token()}
        if extra_headers:
            headers.update(extra_headers)

        async with self.http_client_factory(domain=self.session.shop, config=self.config) as client:
            result = await client.post(self.graphql_path, data=payload, extra_headers=headers)

        if isinstance(result.body, dict) and result.body.get("errors"):
            logger.error("GraphQL errors", extra={
                "shop": self.session.shop,
                "errors": result.body["errors"]
            })
            raise GraphqlQueryError("GraphQL query returned errors", response=result.body)

        return result
