"""
Shop domain validation.

A shop domain is embedded into redirect URLs, token endpoints and session
ids, so it is normalized and checked before any of those are built.
"""

import logging
import re
from typing import Iterable, Optional

from shopify_app_auth.errors import InvalidShopError

logger = logging.getLogger(__name__)

DEFAULT_SHOP_DOMAINS = (
    r"myshopify\.com",
    r"shopify\.com",
    r"myshopify\.io",
)


def normalize_shop_domain(shop: Optional[str]) -> str:
    """
    Normalize a shop domain: strip protocol and trailing slashes, lowercase.

    Args:
        shop: Shop domain (e.g., "https://MyStore.myshopify.com/")

    Returns:
        Normalized domain, or "" for empty input
    """
    if not shop:
        return ""

    shop = shop.strip()
    shop = re.sub(r"^https?://", "", shop, flags=re.IGNORECASE)
    return shop.rstrip("/").lower()


def _shop_domain_regex(custom_shop_domains: Optional[Iterable[str]]) -> re.Pattern:
    domains = list(DEFAULT_SHOP_DOMAINS)
    if custom_shop_domains:
        domains.extend(re.escape(domain.lower()) for domain in custom_shop_domains)

    return re.compile(rf"^[a-z0-9][a-z0-9\-_]*\.({'|'.join(domains)})$")


def sanitize_shop(
    shop: Optional[str],
    custom_shop_domains: Optional[Iterable[str]] = None,
    throw_on_invalid: bool = False
) -> Optional[str]:
    """
    Validate and normalize a shop domain.

    Args:
        shop: Shop domain as received from a request
        custom_shop_domains: Extra domain suffixes accepted besides Shopify's
        throw_on_invalid: Raise instead of returning None

    Returns:
        The normalized domain, or None when invalid

    Raises:
        InvalidShopError: If invalid and throw_on_invalid is set
    """
    normalized = normalize_shop_domain(shop)

    if normalized and _shop_domain_regex(custom_shop_domains).match(normalized):
        return normalized

    if throw_on_invalid:
        logger.warning("Rejected invalid shop domain", extra={"shop": shop})
        raise InvalidShopError(f"Received invalid shop argument: {shop}")

    return None
