"""
Library configuration.

Configuration is an immutable pydantic model passed explicitly to the
OAuth flow and clients. load_config_from_env() builds it from the same
environment variables the app server uses (SHOPIFY_API_KEY,
SHOPIFY_API_SECRET, SHOPIFY_SCOPES, APP_URL).
"""

import logging
import os
from typing import Any, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shopify_app_auth.auth.scopes import AuthScopes
from shopify_app_auth.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2022-10"

MANDATORY_FIELDS = ("api_key", "api_secret_key", "scopes", "host_name")


class ShopifyConfig(BaseModel):
    """Validated configuration consumed by the auth flow and clients."""

    api_key: str = Field(..., min_length=1, description="App client id")
    api_secret_key: str = Field(..., min_length=1, description="App client secret")
    scopes: AuthScopes = Field(..., description="Access scopes requested during OAuth")
    host_name: str = Field(..., min_length=1, description="App host, without scheme")
    host_scheme: Literal["http", "https"] = "https"
    api_version: str = DEFAULT_API_VERSION
    is_embedded_app: bool = True
    is_private_app: bool = False
    custom_shop_domains: List[str] = Field(default_factory=list)
    user_agent_prefix: Optional[str] = None
    log_level: str = "INFO"

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("scopes", mode="before")
    @classmethod
    def parse_scopes(cls, value: Any) -> AuthScopes:
        scopes = value if isinstance(value, AuthScopes) else AuthScopes(value)
        if not len(scopes):
            raise ValueError("at least one scope is required")
        return scopes

    @field_validator("host_name")
    @classmethod
    def validate_host_name(cls, value: str) -> str:
        if "://" in value:
            raise ValueError("host_name must not include a scheme")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def app_url(self) -> str:
        return f"{self.host_scheme}://{self.host_name}"


def validate_config(**params: Any) -> ShopifyConfig:
    """
    Build a ShopifyConfig, reporting problems as ConfigurationError.

    Raises:
        ConfigurationError: If mandatory values are missing or invalid
    """
    missing = [name for name in MANDATORY_FIELDS if not params.get(name)]
    if missing:
        raise ConfigurationError(
            f"Cannot initialize Shopify API Library. Missing values for: {', '.join(missing)}"
        )

    try:
        return ShopifyConfig(**params)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"Invalid Shopify API Library configuration: {problems}") from e


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config_from_env(**overrides: Any) -> ShopifyConfig:
    """
    Load configuration from environment variables.

    Keyword arguments override values read from the environment.

    Raises:
        ConfigurationError: If required variables are missing
    """
    app_url = os.getenv("APP_URL", os.getenv("application_url", ""))
    parsed = urlparse(app_url) if app_url else None

    params: dict = {
        "api_key": os.getenv("SHOPIFY_API_KEY"),
        "api_secret_key": os.getenv("SHOPIFY_API_SECRET"),
        "scopes": os.getenv("SHOPIFY_SCOPES"),
        "host_name": (parsed.netloc or parsed.path) if parsed else None,
        "host_scheme": (parsed.scheme or "https") if parsed else "https",
        "api_version": os.getenv("SHOPIFY_API_VERSION", DEFAULT_API_VERSION),
        "is_embedded_app": _env_flag("SHOPIFY_EMBEDDED_APP", True),
        "is_private_app": _env_flag("SHOPIFY_PRIVATE_APP", False),
        "custom_shop_domains": [
            domain.strip()
            for domain in os.getenv("SHOPIFY_CUSTOM_SHOP_DOMAINS", "").split(",")
            if domain.strip()
        ],
        "user_agent_prefix": os.getenv("SHOPIFY_USER_AGENT_PREFIX"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
    }
    params.update(overrides)

    logger.debug("Loading Shopify configuration from environment", extra={
        "has_api_key": bool(params["api_key"]),
        "has_api_secret": bool(params["api_secret_key"]),
        "host_name": params["host_name"],
    })

    return validate_config(**params)
