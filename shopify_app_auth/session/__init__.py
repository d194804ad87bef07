"""
Session entity and session id derivation.
"""

from shopify_app_auth.session.session import Session
from shopify_app_auth.session.session_utils import AppMode, SessionIdentity

__all__ = ["AppMode", "Session", "SessionIdentity"]
