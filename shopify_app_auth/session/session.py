"""
Session entity produced by the OAuth callback.

The library never persists sessions; the host application stores them
keyed by ``id`` (to_property_list/from_property_list give storage
adapters a flat representation).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shopify_app_auth.auth.scopes import AuthScopes, ScopesInput
from shopify_app_auth.auth.types import AssociatedUser, OnlineAccessInfo

PropertyList = List[Tuple[str, Any]]

# Storage keys, normalized (lowercase, no underscores) -> attribute name
_PROPERTY_KEYS = {
    "id": "id",
    "shop": "shop",
    "state": "state",
    "isonline": "is_online",
    "scope": "scope",
    "expires": "expires",
    "accesstoken": "access_token",
    "onlineaccessinfo": "online_access_info",
}


@dataclass
class Session:
    """
    An authenticated session for one shop.

    Invariant: ``is_online`` is True exactly when ``online_access_info``
    and ``expires`` are both set.
    """
    id: str
    shop: str
    state: str
    is_online: bool
    access_token: Optional[str] = None
    scope: Optional[str] = None
    expires: Optional[datetime] = None
    online_access_info: Optional[OnlineAccessInfo] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Session id is required")
        if not self.shop:
            raise ValueError("Session shop is required")

        if self.expires is not None and self.expires.tzinfo is None:
            self.expires = self.expires.replace(tzinfo=timezone.utc)

        has_online_fields = (self.online_access_info is not None, self.expires is not None)
        if self.is_online and not all(has_online_fields):
            raise ValueError("Online sessions require online_access_info and expires")
        if not self.is_online and any(has_online_fields):
            raise ValueError("Offline sessions cannot carry online_access_info or expires")

    def __repr__(self) -> str:
        # Keep the access token out of reprs and tracebacks
        return (
            f"<Session(id={self.id}, shop={self.shop}, is_online={self.is_online}, "
            f"scope={self.scope}, expires={self.expires})>"
        )

    def is_expired(self, within_ms: int = 0) -> bool:
        """Check if the session expires within ``within_ms`` milliseconds."""
        if self.expires is None:
            return False
        return self.expires - timedelta(milliseconds=within_ms) < datetime.now(timezone.utc)

    def is_active(self, scopes: ScopesInput) -> bool:
        """
        Check if the session can be used for API calls.

        Active means: it has an access token, it is not expired, and its
        granted scopes match ``scopes`` (usually the app's configured ones).
        """
        scopes_unchanged = AuthScopes(scopes).equals(self.scope)
        return scopes_unchanged and bool(self.access_token) and not self.is_expired()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "shop": self.shop,
            "state": self.state,
            "is_online": self.is_online,
            "access_token": self.access_token,
            "scope": self.scope,
            "expires": self.expires,
            "online_access_info": (
                self.online_access_info.model_dump() if self.online_access_info else None
            ),
        }

    def to_property_list(self) -> PropertyList:
        """
        Flatten the session for key/value storage.

        ``expires`` becomes epoch milliseconds and the online access info
        is reduced to the associated user id. None values are dropped.
        """
        entries: PropertyList = []
        for key, value in self.to_dict().items():
            if value is None:
                continue
            if key == "expires":
                value = int(self.expires.timestamp() * 1000)
            elif key == "online_access_info":
                value = self.online_access_info.associated_user.id
            entries.append((key, value))
        return entries

    @classmethod
    def from_property_list(cls, entries: Iterable[Tuple[str, Any]]) -> "Session":
        """Rebuild a session from to_property_list() output."""
        params: Dict[str, Any] = {}
        for key, value in entries:
            if value is None:
                continue

            attribute = _PROPERTY_KEYS.get(key.replace("_", "").lower())
            if attribute is None:
                continue

            if attribute == "is_online":
                value = value.lower() == "true" if isinstance(value, str) else bool(value)
            elif attribute == "expires":
                value = datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
            elif attribute == "online_access_info":
                value = OnlineAccessInfo(associated_user=AssociatedUser(id=int(value)))

            params[attribute] = value

        return cls(**params)
