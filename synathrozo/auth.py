"""Host identity.

Sign-in is handled by the upstream auth provider, which forwards the
authenticated user's id in the ``X-User-Id`` header.
"""

from uuid import UUID

from fastapi import Header

from synathrozo.results import AuthorizationError


def get_current_owner_id(x_user_id: str | None = Header(default=None)) -> UUID | None:
    """Dependency returning the caller's user id, or None when anonymous."""
    if not x_user_id:
        return None
    try:
        return UUID(x_user_id)
    except ValueError:
        return None


def require_owner(owner_id: UUID | None) -> UUID:
    if owner_id is None:
        raise AuthorizationError()
    return owner_id
