"""
Constant-time comparison helper.
"""

import hmac
import json
from typing import Any

from shopify_app_auth.errors import SafeCompareError


def safe_compare(a: Any, b: Any) -> bool:
    """
    Compare two values without leaking timing information.

    Both values are JSON-encoded so strings, lists and dicts compare the
    same way. ``hmac.compare_digest`` does not exit early on the first
    mismatching byte.

    Raises:
        SafeCompareError: If the values have different types
    """
    if type(a) is not type(b):
        raise SafeCompareError(
            f"Mismatched data types provided: {type(a).__name__} and {type(b).__name__}"
        )

    encoded_a = json.dumps(a, sort_keys=True).encode("utf-8")
    encoded_b = json.dumps(b, sort_keys=True).encode("utf-8")

    return hmac.compare_digest(encoded_a, encoded_b)
