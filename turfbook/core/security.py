from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from turfbook.core.config import settings
from turfbook.services.permissions import (
    DEFAULT_STAFF_CAPABILITIES,
    Actor,
    Capabilities,
    Role,
)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """Validate the bearer token issued by the Auth service.

    Returns the decoded JWT payload to downstream dependencies. Raises an HTTP 401
    error when the token is missing or invalid.
    """

    if credentials is None or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    return payload


def actor_from_payload(payload: dict) -> Actor:
    """Build the acting user from the token claims.

    Staff tokens without explicit permission claims fall back to the default
    capabilities of their role.
    """

    try:
        user_id = int(payload.get("sub"))
        role = Role(str(payload.get("role", Role.CONSUMER.value)).lower())
    except (TypeError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token claims",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    permissions = payload.get("permissions")
    if permissions:
        capabilities = Capabilities.from_claims(permissions)
    else:
        capabilities = DEFAULT_STAFF_CAPABILITIES.get(role, Capabilities())

    return Actor(user_id=user_id, role=role, capabilities=capabilities)


def get_current_actor(payload: dict = Depends(get_current_user)) -> Actor:
    return actor_from_payload(payload)


__all__ = ["actor_from_payload", "get_current_actor", "get_current_user"]
