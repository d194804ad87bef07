"""
Secret redaction for log output.

CRITICAL SECURITY REQUIREMENTS:
- NEVER log access tokens, the API secret key or cookie signing keys
- Any extra field whose name looks like a token/secret/key is redacted
- Shopify token patterns are scrubbed from free-form messages

Usage:
    from shopify_app_auth.platform.secrets import redact_secrets, SecretRedactingFilter

    safe_data = redact_secrets({"access_token": "shpat_123", "shop": "a.myshopify.com"})
    handler.addFilter(SecretRedactingFilter())
"""

import logging
import re
from typing import Any

# Patterns for detecting secrets by key name
SECRET_PATTERNS = [
    re.compile(r"(api[_-]?key)", re.IGNORECASE),
    re.compile(r"(secret[_-]?key)", re.IGNORECASE),
    re.compile(r"(access[_-]?token)", re.IGNORECASE),
    re.compile(r"(client[_-]?secret)", re.IGNORECASE),
    re.compile(r"(session[_-]?token)", re.IGNORECASE),
    re.compile(r"(cookie[_-]?keys?)", re.IGNORECASE),
    re.compile(r"(signing[_-]?key)", re.IGNORECASE),
    re.compile(r"(authorization)", re.IGNORECASE),
    re.compile(r"(password)", re.IGNORECASE),
]

# Shopify secret value patterns
SECRET_VALUE_PATTERNS = [
    re.compile(r"(Bearer\s+[a-zA-Z0-9._-]+)"),
    re.compile(r"(shpat_[a-fA-F0-9]{32,})"),  # Admin API access tokens
    re.compile(r"(shpca_[a-fA-F0-9]{32,})"),  # Custom app access tokens
    re.compile(r"(shppa_[a-fA-F0-9]{32,})"),  # Private app passwords
    re.compile(r"(shpss_[a-zA-Z0-9]{24,})"),  # Shared secrets
]

REDACTED_VALUE = "[REDACTED]"


def is_secret_key(key: str) -> bool:
    """
    Check if a dictionary key likely contains a secret.

    Args:
        key: The key name to check

    Returns:
        True if the key name suggests it contains a secret
    """
    return any(pattern.search(key) for pattern in SECRET_PATTERNS)


def redact_value(value: Any) -> Any:
    """Redact Shopify secret patterns from a string value."""
    if not isinstance(value, str):
        return value

    result = value
    for pattern in SECRET_VALUE_PATTERNS:
        result = pattern.sub(REDACTED_VALUE, result)

    return result


def redact_secrets(data: Any, _depth: int = 0) -> Any:
    """
    Recursively redact secrets from a data structure.

    Args:
        data: Dictionary, list, or other data structure

    Returns:
        Copy of data with secrets redacted
    """
    # Prevent infinite recursion
    if _depth > 10:
        return data

    if isinstance(data, dict):
        result = {}
        for key, value in data.items():
            if is_secret_key(str(key)):
                result[key] = REDACTED_VALUE
            else:
                result[key] = redact_secrets(value, _depth + 1)
        return result

    if isinstance(data, (list, tuple)):
        return [redact_secrets(item, _depth + 1) for item in data]

    if isinstance(data, str):
        return redact_value(data)

    return data


class SecretRedactingFilter(logging.Filter):
    """
    Logging filter that redacts secrets from log records.

    Attach it to handlers so records from every library module pass
    through it:

        handler.addFilter(SecretRedactingFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact_value(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = redact_secrets(record.args)
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    redact_value(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        # Extra fields land directly on the record
        for key in list(record.__dict__.keys()):
            if is_secret_key(key):
                setattr(record, key, REDACTED_VALUE)

        return True
