"""
FastAPI/Starlette adapter for the framework-neutral request/response types.
"""

from typing import Dict

from starlette.requests import Request
from starlette.responses import Response

from shopify_app_auth.platform.http import HeaderList, NormalizedRequest, NormalizedResponse


def convert_request(request: Request) -> NormalizedRequest:
    """
    Build a NormalizedRequest from a Starlette request.

    Repeated headers are folded into one value; Cookie headers join with
    "; " so every cookie stays readable.
    """
    headers: Dict[str, str] = {}
    for name, value in request.headers.items():
        if name in headers:
            separator = "; " if name == "cookie" else ", "
            headers[name] = f"{headers[name]}{separator}{value}"
        else:
            headers[name] = value

    return NormalizedRequest(
        method=request.method,
        url=str(request.url),
        headers=headers,
    )


def apply_headers(response: Response, headers: HeaderList) -> Response:
    """Append headers (e.g. Set-Cookie) to a Starlette response."""
    for name, value in headers:
        response.headers.append(name, value)
    return response


def convert_response(normalized: NormalizedResponse) -> Response:
    """Build a Starlette response from a NormalizedResponse."""
    response = Response(status_code=normalized.status_code)
    return apply_headers(response, normalized.headers)
