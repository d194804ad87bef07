"""
Framework-neutral request/response shapes.

The OAuth flow reads inbound requests and writes outbound responses
through these two types only. Converting to and from a concrete web
framework happens in an adapter (see fastapi_adapter.py).
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from starlette.requests import cookie_parser

HeaderList = List[Tuple[str, str]]


@dataclass
class NormalizedRequest:
    """An inbound HTTP request: method, absolute or relative URL, headers."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)

    def get_header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def query_params(self) -> Dict[str, str]:
        # Last value wins for repeated keys
        return dict(parse_qsl(urlsplit(self.url).query, keep_blank_values=True))

    @property
    def cookies(self) -> Dict[str, str]:
        cookie_header = self.get_header("cookie")
        if not cookie_header:
            return {}
        return cookie_parser(cookie_header)


@dataclass
class NormalizedResponse:
    """An outbound HTTP response: status plus an ordered header list."""
    status_code: int = 200
    status_text: str = ""
    headers: HeaderList = field(default_factory=list)

    def __post_init__(self):
        if not self.status_text:
            try:
                self.status_text = HTTPStatus(self.status_code).phrase
            except ValueError:
                self.status_text = ""

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_headers(self, name: str) -> List[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def get_header(self, name: str) -> Optional[str]:
        values = self.get_headers(name)
        return values[0] if values else None
