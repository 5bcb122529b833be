"""
LocalBiz Directory — Auth, Role and Ownership Gates
=====================================================

What:  The authorization pipeline in front of the services.
How:   FastAPI dependencies, composed per route:

           require_identity          bearer token → Identity, else 401
           require_role(Role.ADMIN)  depends on require_identity, else 403
           authorize(identity, ...)  called by services once the resource
                                     is loaded, else 403

Route usage:
    @router.post("/businesses")
    async def create(identity: Identity = Depends(require_role(Role.ADMIN))): ...

    @router.put("/reviews/{review_id}")
    async def update(identity: Identity = Depends(require_identity)): ...
"""

import logging
from typing import Any, Callable, Optional, TypeVar

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.exceptions import ForbiddenError, InvalidTokenError, UnauthenticatedError
from app.models.user import Role
from app.security.tokens import Identity, token_codec

logger = logging.getLogger(__name__)

T = TypeVar("T")

# auto_error=False: a missing header must produce our own 401 body, not
# FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    Resolve the Authorization header into an Identity.

    Raises:
        UnauthenticatedError: header missing, not a bearer token, or the
                              token fails verification
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError(message="Access denied. No token provided.")

    try:
        identity = token_codec.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected token on %s: %s", request.url.path, e.reason)
        raise UnauthenticatedError(message="Invalid token.")

    request.state.identity = identity
    return identity


def require_role(role: Role) -> Callable[..., Any]:
    """Build a dependency that admits only identities carrying `role`."""

    async def role_gate(identity: Identity = Depends(require_identity)) -> Identity:
        if identity.role != role:
            raise ForbiddenError(
                message=f"Access denied. {role.value.capitalize()} only.",
                context={"required_role": role.value, "role": identity.role.value},
            )
        return identity

    return role_gate


def owner_id_of(resource: Any) -> int:
    """Default owner lookup: businesses carry owner_id, reviews user_id."""
    if hasattr(resource, "owner_id"):
        return resource.owner_id
    return resource.user_id


def authorize(
    identity: Identity,
    resource: Optional[T],
    owner_of: Callable[[Any], int] = owner_id_of,
    message: str = "You are not authorized to modify this resource.",
) -> T:
    """
    Allow the call only when `identity` owns `resource`.

    A missing resource (None) is denied the same way as someone else's, so
    callers that want a 404 must check for None before calling this.

    Returns:
        The resource, for chaining.

    Raises:
        ForbiddenError: resource is None or owned by another user
    """
    if resource is None or owner_of(resource) != identity.user_id:
        raise ForbiddenError(message=message, context={"user_id": identity.user_id})
    return resource
