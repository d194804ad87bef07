"""
Shopify session token (JWT) decoding for embedded apps.

Embedded apps receive session tokens signed by Shopify with the app's API
secret instead of cookies. The token's ``dest`` claim names the shop and
``sub`` the staff member, which is enough to derive a session id without
a server-side lookup.

Documentation: https://shopify.dev/docs/apps/auth/oauth/session-tokens
"""

import logging
from typing import Optional, Union

import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from shopify_app_auth.config import ShopifyConfig
from shopify_app_auth.errors import InvalidJwtError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# Clock skew tolerated between Shopify and this server
JWT_LEEWAY_SECONDS = 5


class SessionTokenPayload(BaseModel):
    """Claims carried by a Shopify session token."""
    iss: str
    dest: str
    aud: Union[str, list]
    sub: Optional[str] = None
    exp: int
    nbf: Optional[int] = None
    iat: Optional[int] = None
    jti: Optional[str] = None
    sid: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @property
    def shop(self) -> str:
        """Shop domain from the ``dest`` claim (e.g. "https://mystore.myshopify.com")."""
        return self.dest.replace("https://", "").replace("http://", "").rstrip("/").lower()


def decode_session_token(config: ShopifyConfig, token: str) -> SessionTokenPayload:
    """
    Verify a Shopify session token and return its claims.

    Args:
        config: Library configuration (API key is the expected audience)
        token: JWT session token from the Authorization header

    Returns:
        SessionTokenPayload

    Raises:
        InvalidJwtError: If the token is invalid, expired or for another app
    """
    try:
        payload = jwt.decode(
            token,
            config.api_secret_key,
            algorithms=[JWT_ALGORITHM],
            audience=config.api_key,
            leeway=JWT_LEEWAY_SECONDS,
            options={
                "verify_signature": True,
                "verify_aud": True,
                "verify_exp": True,
                "require": ["exp", "dest", "iss"],
            }
        )
    except jwt.ExpiredSignatureError as e:
        logger.warning("Session token expired")
        raise InvalidJwtError("Session token has expired") from e
    except jwt.InvalidAudienceError as e:
        logger.warning("Session token invalid audience")
        raise InvalidJwtError("Session token had invalid API key") from e
    except jwt.InvalidSignatureError as e:
        logger.warning("Session token invalid signature")
        raise InvalidJwtError("Session token signature is invalid") from e
    except jwt.PyJWTError as e:
        logger.warning("Session token decode error", extra={"error": str(e)})
        raise InvalidJwtError(f"Failed to parse session token: {e}") from e

    try:
        session_token = SessionTokenPayload(**payload)
    except ValidationError as e:
        raise InvalidJwtError("Session token is missing required claims") from e

    logger.debug("Session token verified", extra={"shop": session_token.shop})
    return session_token
