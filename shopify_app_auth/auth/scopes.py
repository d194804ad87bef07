"""
Access scope sets.

Shopify treats ``write_<resource>`` as implying ``read_<resource>``, so two
scope lists compare equal when they grant the same access even if one of
them spells out the implied read scopes.
"""

import re
from typing import Iterable, List, Optional, Union

SCOPE_DELIMITER = ","

_WRITE_SCOPE_REGEX = re.compile(r"^(unauthenticated_)?write_(.*)$")

ScopesInput = Union[str, Iterable[str], "AuthScopes", None]


class AuthScopes:
    """An immutable set of access scopes with implied-scope awareness."""

    def __init__(self, scopes: ScopesInput = None):
        if isinstance(scopes, AuthScopes):
            scope_list: List[str] = sorted(scopes._expanded)
        elif isinstance(scopes, str):
            scope_list = re.split(rf"{SCOPE_DELIMITER}\s*", scopes)
        elif scopes:
            scope_list = list(scopes)
        else:
            scope_list = []

        scope_list = [scope.strip() for scope in scope_list if scope and scope.strip()]

        implied = set(self._implied_scopes(scope_list))
        scope_set = set(scope_list)

        self._compressed = frozenset(scope_set - implied)
        self._expanded = frozenset(scope_set | implied)

    @staticmethod
    def _implied_scopes(scopes: List[str]) -> List[str]:
        implied = []
        for scope in scopes:
            match = _WRITE_SCOPE_REGEX.match(scope)
            if match:
                implied.append(f"{match.group(1) or ''}read_{match.group(2)}")
        return implied

    def has(self, scopes: ScopesInput) -> bool:
        """Check whether every scope in ``scopes`` is granted by this set."""
        other = scopes if isinstance(scopes, AuthScopes) else AuthScopes(scopes)
        return other._compressed <= self._expanded

    def equals(self, scopes: Optional[ScopesInput]) -> bool:
        """Check whether ``scopes`` grants exactly the same access."""
        other = scopes if isinstance(scopes, AuthScopes) else AuthScopes(scopes)
        return self._expanded == other._expanded

    def to_list(self) -> List[str]:
        return sorted(self._compressed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthScopes):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._expanded)

    def __iter__(self):
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._compressed)

    def __str__(self) -> str:
        return SCOPE_DELIMITER.join(self.to_list())

    def __repr__(self) -> str:
        return f"<AuthScopes({str(self)!r})>"
