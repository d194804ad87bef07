"""
FastAPI routes for the Shopify OAuth install flow.

Routes:
- GET <install_path>?shop=...: start OAuth, redirect to Shopify
- GET <callback_path>: complete OAuth, hand the session to the host app

Persisting the session is the host application's job: pass ``on_session``
to receive every session the callback creates.
"""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from shopify_app_auth.errors import (
    CookieNotFound,
    InvalidOAuthCallback,
    InvalidShopError,
    MissingRequiredArgument,
    PrivateAppError,
    ShopifyError,
    TokenExchangeError,
)
from shopify_app_auth.platform.fastapi_adapter import apply_headers, convert_request, convert_response
from shopify_app_auth.session.session import Session
from shopify_app_auth.shopify_api import ShopifyApi

logger = logging.getLogger(__name__)

SessionHandler = Callable[[Session], Awaitable[None]]


def _error_response(error: ShopifyError, status_code: int, detail: str) -> Response:
    """JSON error body carrying any headers the failed call still owes the client."""
    response = JSONResponse(status_code=status_code, content={"detail": detail})
    return apply_headers(response, error.headers)


def create_auth_router(
    shopify: ShopifyApi,
    install_path: str = "/api/auth/install",
    callback_path: str = "/api/auth/callback",
    use_online_tokens: bool = False,
    on_session: Optional[SessionHandler] = None,
    route_prefix: str = ""
) -> APIRouter:
    """
    Build an APIRouter serving the install and callback routes.

    The state cookie is scoped to the public callback path, so a router
    mounted with ``app.include_router(router, prefix=...)`` must be built
    with the same ``route_prefix``.

    Args:
        shopify: Configured library components
        install_path: Route that starts OAuth
        callback_path: Route Shopify redirects back to
        use_online_tokens: Request online (per-user) tokens
        on_session: Coroutine called with each new session
        route_prefix: Prefix the router is mounted under, e.g. "/shopify"

    Returns:
        APIRouter
    """
    router = APIRouter(tags=["shopify-auth"])
    public_callback_path = f"{route_prefix.rstrip('/')}{callback_path}"

    @router.get(install_path)
    async def install(shop: str = Query(..., description="Shop domain")) -> Response:
        try:
            normalized = shopify.auth.begin(
                shop=shop,
                callback_path=public_callback_path,
                is_online=use_online_tokens
            )
        except InvalidShopError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid Shop Domain"
            )
        except PrivateAppError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="OAuth is not available for private apps"
            )

        return convert_response(normalized)

    @router.get(callback_path)
    async def callback(request: Request) -> Response:
        try:
            result = await shopify.auth.callback(convert_request(request))
        except CookieNotFound as e:
            return _error_response(e, status.HTTP_400_BAD_REQUEST, "Invalid OAuth State")
        except InvalidOAuthCallback as e:
            return _error_response(e, status.HTTP_400_BAD_REQUEST, "Security Verification Failed")
        except (MissingRequiredArgument, InvalidShopError) as e:
            return _error_response(e, status.HTTP_400_BAD_REQUEST, "Invalid OAuth Request")
        except PrivateAppError as e:
            return _error_response(
                e,
                status.HTTP_403_FORBIDDEN,
                "OAuth is not available for private apps"
            )
        except TokenExchangeError as e:
            return _error_response(e, status.HTTP_502_BAD_GATEWAY, "Token Exchange Failed")

        session = result.session
        if on_session is not None:
            await on_session(session)

        if shopify.config.is_embedded_app:
            redirect_url = f"https://{session.shop}/admin/apps/{shopify.config.api_key}"
        else:
            redirect_url = "/"

        logger.info("OAuth flow completed", extra={
            "shop": session.shop,
            "is_online": session.is_online
        })

        response = RedirectResponse(url=redirect_url, status_code=status.HTTP_302_FOUND)
        return apply_headers(response, result.headers)

    return router
