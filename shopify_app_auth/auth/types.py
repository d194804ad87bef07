"""
OAuth wire types.

Token exchange responses from POST /admin/oauth/access_token come in two
shapes. Online (per-user) responses carry ``associated_user``; offline
responses do not. That field is the only access-mode discriminator.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

STATE_COOKIE_NAME = "shopify_app_state"
SESSION_COOKIE_NAME = "shopify_app_session"

REQUIRED_CALLBACK_PARAMS = ("shop", "code", "state", "hmac", "timestamp")


class AssociatedUser(BaseModel):
    """The staff member who authorized an online access token."""
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    account_owner: Optional[bool] = None
    locale: Optional[str] = None
    collaborator: Optional[bool] = None

    model_config = ConfigDict(extra="allow")


class OnlineAccessInfo(BaseModel):
    """User-scoped details attached to an online session."""
    associated_user: AssociatedUser
    expires_in: Optional[int] = Field(None, description="Token lifetime in seconds")
    associated_user_scope: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class AccessTokenResponse(BaseModel):
    """Offline token exchange response."""
    access_token: str = Field(..., min_length=1)
    scope: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class OnlineAccessResponse(AccessTokenResponse):
    """Online token exchange response."""
    expires_in: int = Field(..., ge=0)
    associated_user_scope: Optional[str] = None
    associated_user: AssociatedUser

    def online_access_info(self) -> OnlineAccessInfo:
        # Everything except the token itself belongs to the access info
        return OnlineAccessInfo(**self.model_dump(exclude={"access_token", "scope"}))
