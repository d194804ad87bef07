"""
Session identity derivation.

Offline sessions: ``offline_<shop>``, stable across restarts.
Online sessions:
- embedded apps: ``<shop>_<userId>``, so a session token (JWT) maps back
  to the stored session without a lookup table
- non-embedded apps: a fresh UUID per login, carried in a signed cookie
"""

import logging
import re
import uuid
from enum import Enum
from typing import Optional, Sequence

from shopify_app_auth.auth.shop_validator import sanitize_shop
from shopify_app_auth.auth.types import SESSION_COOKIE_NAME
from shopify_app_auth.config import ShopifyConfig
from shopify_app_auth.errors import MissingJwtTokenError, MissingRequiredArgument
from shopify_app_auth.platform.cookies import SignedCookieJar
from shopify_app_auth.platform.http import NormalizedRequest
from shopify_app_auth.session.session_token import decode_session_token

logger = logging.getLogger(__name__)

OFFLINE_ID_PREFIX = "offline_"

_BEARER_REGEX = re.compile(r"^Bearer (.+)$")


class AppMode(str, Enum):
    """How the app is loaded, which decides online session id derivation."""
    EMBEDDED = "embedded"
    NON_EMBEDDED = "non_embedded"


class SessionIdentity:
    """Derives session ids for a configured app."""

    def __init__(self, config: ShopifyConfig, cookie_keys: Optional[Sequence[str]] = None):
        self.config = config
        self.cookie_keys = list(cookie_keys) if cookie_keys else [config.api_secret_key]

    @property
    def default_mode(self) -> AppMode:
        return AppMode.EMBEDDED if self.config.is_embedded_app else AppMode.NON_EMBEDDED

    def _clean_shop(self, shop: str) -> str:
        return sanitize_shop(shop, self.config.custom_shop_domains, throw_on_invalid=True)

    def offline_id(self, shop: str) -> str:
        """
        Session id for a shop's offline token.

        Raises:
            InvalidShopError: If the shop domain is invalid
        """
        return f"{OFFLINE_ID_PREFIX}{self._clean_shop(shop)}"

    def jwt_session_id(self, shop: str, user_id: str) -> str:
        """
        Session id for an online token reachable from a session token.

        Raises:
            InvalidShopError: If the shop domain is invalid
            MissingRequiredArgument: If the user id is empty
        """
        if user_id is None or str(user_id) == "":
            raise MissingRequiredArgument("A user id is required for online session ids")
        return f"{self._clean_shop(shop)}_{user_id}"

    def online_id(self, shop: str, user_id: str, mode: Optional[AppMode] = None) -> str:
        """
        Session id for an online token.

        Embedded mode is deterministic in (shop, user_id); non-embedded mode
        returns a new random id on every call.

        Raises:
            InvalidShopError: If the shop domain is invalid
        """
        mode = mode or self.default_mode
        if mode == AppMode.EMBEDDED:
            return self.jwt_session_id(shop, user_id)

        self._clean_shop(shop)
        return str(uuid.uuid4())

    def get_current_session_id(
        self,
        request: NormalizedRequest,
        is_online: bool
    ) -> Optional[str]:
        """
        Find the session id for an inbound request.

        Embedded apps read the Bearer session token; other apps read the
        signed session cookie set during the OAuth callback.

        Returns:
            The session id, or None if the request carries none

        Raises:
            MissingJwtTokenError: If Authorization is not a Bearer header
            InvalidJwtError: If the session token fails verification
        """
        if self.config.is_embedded_app:
            auth_header = request.get_header("authorization")
            if not auth_header:
                return None

            match = _BEARER_REGEX.match(auth_header)
            if not match:
                logger.warning("Authorization header without Bearer token")
                raise MissingJwtTokenError("Missing Bearer token in authorization header")

            payload = decode_session_token(self.config, match.group(1))
            if is_online:
                return self.jwt_session_id(payload.shop, payload.sub)
            return self.offline_id(payload.shop)

        cookies = SignedCookieJar(request, keys=self.cookie_keys)
        return cookies.get_verified(SESSION_COOKIE_NAME)
