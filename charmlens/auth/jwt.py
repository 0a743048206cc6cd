"""JWT token generation and validation for charmlens.

Tokens are issued by the identity provider in front of charmlens; this module
only needs to verify them and read the actor claims. `create_access_token` is
used by tests and local tooling.
"""

import os
import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from dotenv import load_dotenv

from charmlens.models.actor import Actor

load_dotenv()

# JWT configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-in-production-charmlens-dev-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

ADMIN_ROLE = "admin"


def create_access_token(
    actor_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    role: Optional[str] = None,
) -> str:
    """Create a JWT access token for an actor.

    Args:
        actor_id: Actor ID to encode in token
        email: Optional email claim
        name: Optional display name claim
        role: Optional role claim ("admin" grants audit log access)

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": actor_id,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
        "iat": now,
    }
    if email:
        payload["email"] = email
    if name:
        payload["name"] = name
    if role:
        payload["role"] = role
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict]:
    """Decode and validate a JWT access token.

    Returns:
        Decoded token payload, or None if invalid or expired
    """
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_actor_from_token(token: str) -> Optional[Actor]:
    """Build the Actor described by a JWT, or None if the token is invalid."""
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    return Actor(
        id=payload["sub"],
        email=payload.get("email"),
        display_name=payload.get("name"),
        is_admin=payload.get("role") == ADMIN_ROLE,
    )
