"""
Logging setup for the library.

Modules log through ``logging.getLogger(__name__)`` with structured
context in ``extra``. Nothing is emitted unless the host application
configures a handler, either its own or via configure_logging().
"""

import logging
from typing import Optional, Union

from shopify_app_auth.errors import FeatureDeprecatedError
from shopify_app_auth.platform.secrets import SecretRedactingFilter
from shopify_app_auth.version import __version__

PACKAGE_LOGGER_NAME = "shopify_app_auth"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    handler: Optional[logging.Handler] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Sets the level and attaches a handler that redacts secrets. Calling it
    again replaces the level but never stacks a second redacting handler.

    Args:
        level: Logging level name or number
        handler: Optional handler; a stderr StreamHandler is used otherwise

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)

    if handler in package_logger.handlers:
        return package_logger

    if handler is None:
        for existing in package_logger.handlers:
            if any(isinstance(f, SecretRedactingFilter) for f in existing.filters):
                return package_logger

        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    handler.addFilter(SecretRedactingFilter())
    package_logger.addHandler(handler)
    return package_logger


def _version_tuple(version: str) -> tuple:
    return tuple(int(part) for part in version.split(".") if part.isdigit())


def log_deprecated(logger: logging.Logger, version: str, message: str) -> None:
    """
    Warn about a deprecated feature that is removed in ``version``.

    Raises:
        FeatureDeprecatedError: If the library has reached ``version``
    """
    if _version_tuple(__version__) >= _version_tuple(version):
        raise FeatureDeprecatedError(f"Feature was deprecated in version {version}")

    logger.warning(f"[Deprecated | {version}] {message}")
