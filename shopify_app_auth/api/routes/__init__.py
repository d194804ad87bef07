# API routes
from shopify_app_auth.api.routes.auth import create_auth_router

__all__ = ["create_auth_router"]
