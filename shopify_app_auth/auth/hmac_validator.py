"""
HMAC verification for requests signed by Shopify.

Shopify signs OAuth callbacks (and app proxy / embedded entry requests)
with HMAC-SHA256 keyed by the app's API secret. The signed message is the
query string without ``hmac``/``signature``, sorted by key and
form-urlencoded.

Documentation: https://shopify.dev/docs/apps/auth/oauth/getting-started#step-1-verify-the-installation-request
"""

import base64
import hashlib
import hmac
import logging
from typing import Mapping
from urllib.parse import urlencode

from shopify_app_auth.errors import MissingRequiredArgument

logger = logging.getLogger(__name__)

EXCLUDED_PARAMS = ("hmac", "signature")

HEX = "hex"
BASE64 = "base64"


def stringify_query(query: Mapping[str, str]) -> str:
    """
    Build the canonical message Shopify signs: sorted, urlencoded k=v pairs.
    """
    params = sorted(
        (key, value) for key, value in query.items() if key not in EXCLUDED_PARAMS
    )
    return urlencode(params)


def generate_local_hmac(secret: str, query: Mapping[str, str], encoding: str = HEX) -> str:
    """
    Compute the HMAC Shopify would send for ``query``.

    Args:
        secret: Shopify app API secret
        query: Query parameters (``hmac`` and ``signature`` are ignored)
        encoding: "hex" (OAuth callbacks) or "base64"

    Returns:
        Encoded HMAC-SHA256 digest
    """
    if not secret:
        raise MissingRequiredArgument("An API secret is required to compute an HMAC")
    if encoding not in (HEX, BASE64):
        raise ValueError(f"Unsupported HMAC encoding: {encoding}")

    digest = hmac.new(
        secret.encode("utf-8"),
        stringify_query(query).encode("utf-8"),
        hashlib.sha256
    )

    if encoding == BASE64:
        return base64.b64encode(digest.digest()).decode("utf-8")
    return digest.hexdigest()


def validate_hmac(secret: str, query: Mapping[str, str], encoding: str = HEX) -> bool:
    """
    Verify the ``hmac`` parameter of a Shopify-signed query.

    Never raises for malformed input: a missing, non-string or non-ASCII
    ``hmac`` value simply fails verification.

    Args:
        secret: Shopify app API secret
        query: All query parameters from the request
        encoding: Encoding of the supplied HMAC

    Returns:
        True if the HMAC is valid, False otherwise

    Raises:
        MissingRequiredArgument: If ``secret`` is empty
    """
    if not secret:
        raise MissingRequiredArgument("An API secret is required to validate an HMAC")

    received_hmac = query.get("hmac")
    if not received_hmac or not isinstance(received_hmac, str):
        return False

    if not all(isinstance(value, str) for value in query.values()):
        return False

    try:
        received = received_hmac.encode("ascii")
    except UnicodeEncodeError:
        return False

    computed = generate_local_hmac(secret, query, encoding).encode("ascii")

    # Constant-time comparison to prevent timing attacks
    return hmac.compare_digest(computed, received)
