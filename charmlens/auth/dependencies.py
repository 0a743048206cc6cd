"""FastAPI dependencies for authentication."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from charmlens.auth.jwt import get_actor_from_token
from charmlens.models.actor import Actor

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_current_actor(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Actor:
    """Get the authenticated actor from the bearer JWT.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    actor = get_actor_from_token(credentials.credentials)
    if not actor:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


def get_current_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Require an administrator.

    Raises:
        HTTPException: 403 if the actor is not an administrator
    """
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return actor
