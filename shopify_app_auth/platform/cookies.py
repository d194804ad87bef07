"""
Signed cookies.

Values are stored in the client next to a tamper-evident signature
cookie (``<name>.sig``). The signature is HMAC-SHA256 over the cookie
name, the percent-encoded value as sent, and the expiry, so a cookie
cannot be renamed, edited or kept alive past its expiry without
invalidating it.

Key rotation: the first key signs, every key verifies.

Forged, expired and missing cookies are reported identically (None) so
callers cannot be used as an oracle for which check failed.
"""

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from http.cookies import SimpleCookie
from typing import List, Optional, Sequence
from urllib.parse import quote, unquote

from shopify_app_auth.errors import MissingRequiredArgument
from shopify_app_auth.platform.http import HeaderList, NormalizedRequest

logger = logging.getLogger(__name__)

SIGNATURE_SUFFIX = ".sig"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


class SignedCookieJar:
    """
    Reads signed cookies from a request and collects Set-Cookie headers.

    The jar never touches a framework response object: outgoing cookies
    accumulate in ``response_headers`` for the caller to forward.
    """

    def __init__(
        self,
        request: Optional[NormalizedRequest],
        keys: Sequence[str],
        secure: bool = True
    ):
        if not keys or not all(keys):
            raise MissingRequiredArgument("At least one non-empty cookie signing key is required")

        self.keys: List[str] = list(keys)
        self.secure = secure
        self.incoming = request.cookies if request is not None else {}
        self.response_headers: HeaderList = []

    def _signature(self, key: str, name: str, value: str, expires_at: int) -> str:
        message = f"{name}={value};{expires_at}".encode("utf-8")
        return _b64url(hmac.new(key.encode("utf-8"), message, hashlib.sha256).digest())

    def _write(
        self,
        name: str,
        value: str,
        expires: Optional[datetime],
        same_site: Optional[str],
        secure: bool,
        path: str,
        http_only: bool,
        max_age: Optional[int] = None
    ) -> None:
        cookie: SimpleCookie = SimpleCookie()
        cookie[name] = value
        morsel = cookie[name]
        morsel["path"] = path
        if expires is not None:
            morsel["expires"] = format_datetime(expires.astimezone(timezone.utc), usegmt=True)
        if max_age is not None:
            morsel["max-age"] = max_age
        if same_site:
            morsel["samesite"] = same_site.capitalize()
        if secure:
            morsel["secure"] = True
        if http_only:
            morsel["httponly"] = True

        self.response_headers.append(("Set-Cookie", cookie.output(header="").strip()))

    def set_signed(
        self,
        name: str,
        value: str,
        expires: Optional[datetime] = None,
        same_site: Optional[str] = "lax",
        secure: Optional[bool] = None,
        path: str = "/",
        http_only: bool = True
    ) -> None:
        """
        Queue a signed cookie.

        Args:
            name: Cookie name
            value: Cookie value
            expires: Expiry (aware datetime); None for a browser-session cookie
            same_site: SameSite attribute ("lax", "strict", "none")
            secure: Secure attribute; defaults to the jar setting
            path: Cookie path
            http_only: HttpOnly attribute
        """
        if secure is None:
            secure = self.secure

        expires_at = int(expires.timestamp()) if expires is not None else 0
        encoded = quote(value, safe="")
        signature = self._signature(self.keys[0], name, encoded, expires_at)

        self._write(name, encoded, expires, same_site, secure, path, http_only)
        self._write(
            f"{name}{SIGNATURE_SUFFIX}",
            f"{expires_at}.{signature}",
            expires,
            same_site,
            secure,
            path,
            http_only,
        )

    def get_verified(self, name: str) -> Optional[str]:
        """
        Return the cookie value if its signature verifies with any key.

        Returns:
            The value, or None when missing, forged or expired
        """
        raw_value = self.incoming.get(name)
        raw_signature = self.incoming.get(f"{name}{SIGNATURE_SUFFIX}")
        if raw_value is None or not raw_signature:
            return None

        expires_part, _, signature = raw_signature.partition(".")
        if not expires_part.isdigit() or not signature:
            return None

        expires_at = int(expires_part)
        if expires_at and expires_at <= datetime.now(timezone.utc).timestamp():
            logger.debug("Signed cookie expired", extra={"cookie_name": name})
            return None

        matched = False
        for key in self.keys:
            expected = self._signature(key, name, raw_value, expires_at)
            # Check every key so timing does not reveal which one matched
            if hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii", "replace")):
                matched = True

        if not matched:
            logger.debug("Signed cookie failed verification", extra={"cookie_name": name})
            return None

        return unquote(raw_value)

    def delete(self, name: str, path: str = "/") -> None:
        """Queue headers that expire the cookie and its signature."""
        for cookie_name in (name, f"{name}{SIGNATURE_SUFFIX}"):
            self._write(
                cookie_name,
                "",
                _EPOCH,
                "lax",
                self.secure,
                path,
                True,
                max_age=0,
            )
