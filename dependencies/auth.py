from typing import Optional
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException, Request, status
from jose import JWTError, jwt
from pydantic import BaseModel

from core.config import settings
from core.logging_config import logger
from models.enums import Role


# ============================================================
# Current User Model (the authenticated principal)
# ============================================================
class CurrentUser(BaseModel):
    id: str
    username: str
    role: Role

    email: Optional[str] = None
    full_name: Optional[str] = None


# ============================================================
# TOKENS
# Login lives in the identity service; this API only trusts
# bearer tokens signed with the shared secret.
# ============================================================
def create_access_token(user: CurrentUser, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES
    )
    payload = {
        "sub": user.id,
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "role": str(user.role),
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[CurrentUser]:
    """
    Returns the principal carried by a bearer token,
    or None when the token is invalid or expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    # Unknown roles get the least privileged one
    try:
        role = Role(payload.get("role"))
    except ValueError:
        logger.warning(f"Unknown role '{payload.get('role')}' for user {user_id}, using Viewer")
        role = Role.viewer

    return CurrentUser(
        id=user_id,
        username=payload.get("username") or user_id,
        role=role,
        email=payload.get("email"),
        full_name=payload.get("full_name"),
    )


def get_bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


# ============================================================
# ROUTE DEPENDENCIES
# The principal is resolved once per request by
# AuthenticationMiddleware and kept on request.state.
# ============================================================
def get_optional_user(request: Request) -> Optional[CurrentUser]:
    return getattr(request.state, "user", None)


def get_current_user(request: Request) -> CurrentUser:
    user = get_optional_user(request)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "message": "Authentication required",
                    "status": status.HTTP_401_UNAUTHORIZED,
                }
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
