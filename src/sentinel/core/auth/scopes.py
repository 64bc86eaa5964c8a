"""Scope authorization."""

from collections.abc import Iterable

from sentinel.core.errors import AuthFailure


class ScopeAuthorizer:
    """Decide which scopes a principal is granted.

    An empty request is granted the whole allowed set. Otherwise every
    requested scope must be allowed, compared exactly and case-sensitively;
    a single unknown scope fails the request with no partial grant.
    """

    def authorize(
        self,
        requested: Iterable[str],
        allowed: Iterable[str],
    ) -> frozenset[str]:
        """Return the granted scopes.

        Raises:
            AuthFailure: If any requested scope is outside ``allowed``
        """
        requested_set = frozenset(requested)
        allowed_set = frozenset(allowed)

        if not requested_set:
            return allowed_set
        if not requested_set <= allowed_set:
            raise AuthFailure("scope_not_allowed")
        return requested_set
