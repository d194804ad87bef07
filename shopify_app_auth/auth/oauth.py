"""
OAuth authorization-code flow for Shopify apps.

Handles:
- Begin: state generation, signed state cookie, authorization redirect
- Callback: state cookie consumption, HMAC and state verification
- Token exchange and online/offline classification
- Session id derivation and (non-embedded apps) the session cookie

The flow keeps no server-side state. ``begin`` and ``callback`` are
correlated only through the signed, short-lived state cookie, which the
callback deletes as it reads it.

Documentation: https://shopify.dev/docs/apps/auth/oauth/getting-started
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Sequence
from urllib.parse import urlencode

from pydantic import ValidationError

from shopify_app_auth.auth.hmac_validator import validate_hmac
from shopify_app_auth.auth.nonce import NonceGenerator
from shopify_app_auth.auth.safe_compare import safe_compare
from shopify_app_auth.auth.shop_validator import sanitize_shop
from shopify_app_auth.auth.types import (
    REQUIRED_CALLBACK_PARAMS,
    SESSION_COOKIE_NAME,
    STATE_COOKIE_NAME,
    AccessTokenResponse,
    OnlineAccessResponse,
)
from shopify_app_auth.clients.http_client import ShopifyHttpClient
from shopify_app_auth.config import ShopifyConfig
from shopify_app_auth.errors import (
    CookieNotFound,
    HttpRequestError,
    HttpResponseError,
    InvalidOAuthCallback,
    MissingRequiredArgument,
    PrivateAppError,
    ShopifyError,
    TokenExchangeError,
)
from shopify_app_auth.logger import log_deprecated
from shopify_app_auth.platform.cookies import SignedCookieJar
from shopify_app_auth.platform.http import HeaderList, NormalizedRequest, NormalizedResponse
from shopify_app_auth.session.session import Session
from shopify_app_auth.session.session_utils import SessionIdentity

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PATH = "/admin/oauth/access_token"

STATE_COOKIE_LIFETIME = timedelta(seconds=60)

HttpClientFactory = Callable[..., ShopifyHttpClient]


@dataclass
class CallbackResult:
    """Outcome of a successful OAuth callback."""
    session: Session
    headers: HeaderList = field(default_factory=list)


class OAuthFlow:
    """
    Two-phase OAuth flow: begin() redirects to Shopify, callback() builds
    the session.

    Args:
        config: Library configuration
        cookie_keys: Cookie signing keys, primary first; defaults to the API secret
        http_client_factory: Builds the client used for the token exchange
        nonce_generator: Source of state values
    """

    def __init__(
        self,
        config: ShopifyConfig,
        cookie_keys: Optional[Sequence[str]] = None,
        http_client_factory: HttpClientFactory = ShopifyHttpClient,
        nonce_generator: Optional[NonceGenerator] = None
    ):
        self.config = config
        self.cookie_keys = list(cookie_keys) if cookie_keys else [config.api_secret_key]
        self.http_client_factory = http_client_factory
        self.nonce_generator = nonce_generator or NonceGenerator()
        self.identity = SessionIdentity(config, cookie_keys=self.cookie_keys)

    def _throw_if_private_app(self) -> None:
        if self.config.is_private_app:
            raise PrivateAppError("Cannot perform OAuth for private apps")

    def _clean_shop(self, shop: str) -> str:
        return sanitize_shop(shop, self.config.custom_shop_domains, throw_on_invalid=True)

    def begin(self, shop: str, callback_path: str, is_online: bool) -> NormalizedResponse:
        """
        Start OAuth: redirect the merchant to Shopify's authorization page.

        Args:
            shop: Shop domain
            callback_path: Path of the app's callback route (e.g. "/auth/callback")
            is_online: Request an online (per-user) access token

        Returns:
            302 response with the Location and state cookie headers

        Raises:
            PrivateAppError: If the app is a private app
            MissingRequiredArgument: If callback_path is empty
            InvalidShopError: If the shop domain is invalid
        """
        self._throw_if_private_app()

        if not callback_path:
            raise MissingRequiredArgument("A callback path is required to begin OAuth")
        if not callback_path.startswith("/"):
            callback_path = f"/{callback_path}"

        logger.info("Beginning OAuth", extra={
            "shop": shop,
            "is_online": is_online,
            "callback_path": callback_path
        })

        clean_shop = self._clean_shop(shop)

        cookies = SignedCookieJar(None, keys=self.cookie_keys)
        state = self.nonce_generator.generate()

        # Scoped to the callback route so it cannot be replayed elsewhere
        cookies.set_signed(
            STATE_COOKIE_NAME,
            state,
            expires=datetime.now(timezone.utc) + STATE_COOKIE_LIFETIME,
            same_site="lax",
            secure=True,
            path=callback_path,
        )

        query = {
            "client_id": self.config.api_key,
            "scope": str(self.config.scopes),
            "redirect_uri": f"{self.config.app_url}{callback_path}",
            "state": state,
            "grant_options[]": "per-user" if is_online else "",
        }
        redirect_url = f"https://{clean_shop}/admin/oauth/authorize?{urlencode(query)}"

        response = NormalizedResponse(status_code=302, status_text="Found")
        response.headers.extend(cookies.response_headers)
        response.add_header("Location", redirect_url)

        logger.debug("OAuth started, redirecting to Shopify", extra={
            "shop": clean_shop,
            "is_online": is_online
        })

        return response

    async def callback(
        self,
        request: NormalizedRequest,
        is_online: Optional[bool] = None
    ) -> CallbackResult:
        """
        Complete OAuth: verify the callback, exchange the code, build the session.

        Args:
            request: The inbound callback request
            is_online: Deprecated and ignored; the token response decides

        Returns:
            CallbackResult with the session and headers to forward

        Raises:
            PrivateAppError: If the app is a private app
            MissingRequiredArgument: If the shop parameter is absent
            CookieNotFound: If the state cookie is missing, expired or forged
            InvalidOAuthCallback: If the HMAC or state does not match
            InvalidShopError: If the shop domain is invalid
            TokenExchangeError: If the token exchange fails

        Errors raised after the state cookie is read carry the headers that
        delete it in their ``headers`` attribute.
        """
        self._throw_if_private_app()

        if is_online is not None:
            log_deprecated(
                logger,
                "2.0.0",
                "The is_online param is no longer required for auth callback"
            )

        query = request.query_params
        shop = query.get("shop")

        cookies = SignedCookieJar(request, keys=self.cookie_keys)

        state_from_cookie = cookies.get_verified(STATE_COOKIE_NAME)
        cookies.delete(STATE_COOKIE_NAME, path=request.path)

        # The state is consumed whether or not the callback succeeds
        try:
            if not shop:
                raise MissingRequiredArgument("Callback is missing the shop parameter")

            logger.info("Completing OAuth", extra={"shop": shop})

            if not state_from_cookie:
                logger.error("Could not find OAuth cookie", extra={"shop": shop})
                raise CookieNotFound(
                    f"Cannot complete OAuth process. Could not find an OAuth cookie for shop url: {shop}"
                )

            if not self._valid_query(query, state_from_cookie):
                logger.error("Invalid OAuth callback", extra={"shop": shop})
                raise InvalidOAuthCallback("Invalid OAuth callback.")

            logger.debug("OAuth request is valid, requesting access token", extra={"shop": shop})

            clean_shop = self._clean_shop(shop)
            token_body = await self._exchange_code(clean_shop, query["code"])
            session = self._create_session(token_body, clean_shop, state_from_cookie)
        except ShopifyError as e:
            e.headers = list(cookies.response_headers)
            raise

        if not self.config.is_embedded_app:
            cookies.set_signed(
                SESSION_COOKIE_NAME,
                session.id,
                expires=session.expires,
                same_site="lax",
                secure=True,
                path="/",
            )

        return CallbackResult(session=session, headers=cookies.response_headers)

    def _valid_query(self, query: Dict[str, str], state_from_cookie: str) -> bool:
        if any(not query.get(param) for param in REQUIRED_CALLBACK_PARAMS):
            return False

        # Evaluate both checks so timing does not reveal which one failed
        hmac_valid = validate_hmac(self.config.api_secret_key, query)
        state_valid = safe_compare(query["state"], state_from_cookie)
        return hmac_valid and state_valid

    async def _exchange_code(self, shop: str, code: str) -> dict:
        body = {
            "client_id": self.config.api_key,
            "client_secret": self.config.api_secret_key,
            "code": code,
        }

        try:
            async with self.http_client_factory(domain=shop, config=self.config) as client:
                result = await client.post(ACCESS_TOKEN_PATH, data=body)
        except HttpResponseError as e:
            logger.error("Token exchange failed", extra={
                "shop": shop,
                "status_code": e.status_code
            })
            raise TokenExchangeError(f"Token exchange failed: {e.status_code}") from e
        except HttpRequestError as e:
            logger.error("Token exchange request error", extra={
                "shop": shop,
                "error": str(e)
            })
            raise TokenExchangeError(f"Token exchange request error: {e}") from e

        if not isinstance(result.body, dict):
            raise TokenExchangeError("Token response is not a JSON object")

        logger.info("Token exchange successful", extra={"shop": shop})
        return result.body

    def _create_session(self, token_body: dict, shop: str, state_from_cookie: str) -> Session:
        is_online = bool(token_body.get("associated_user"))

        logger.info("Creating new session", extra={"shop": shop, "is_online": is_online})

        try:
            if is_online:
                response = OnlineAccessResponse(**token_body)
            else:
                response = AccessTokenResponse(**token_body)
        except ValidationError as e:
            logger.error("Malformed token response", extra={
                "shop": shop,
                "is_online": is_online,
                "error_count": e.error_count()
            })
            raise TokenExchangeError("Token response is malformed") from e

        if not is_online:
            return Session(
                id=self.identity.offline_id(shop),
                shop=shop,
                state=state_from_cookie,
                is_online=False,
                access_token=response.access_token,
                scope=response.scope,
            )

        return Session(
            id=self.identity.online_id(shop, str(response.associated_user.id)),
            shop=shop,
            state=state_from_cookie,
            is_online=True,
            access_token=response.access_token,
            scope=response.scope,
            expires=datetime.now(timezone.utc) + timedelta(seconds=response.expires_in),
            online_access_info=response.online_access_info(),
        )
