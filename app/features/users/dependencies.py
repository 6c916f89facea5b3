"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.features.users.auth import user_id_from_payload, verify_jwt_token


# auto_error is off so a missing header reaches the authorization guard as "no user"
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str | None:
    """
    Resolve the authenticated user id for this request.

    Returns None when no bearer token was sent. A token that is present but
    invalid or expired raises Unauthenticated.
    """
    if credentials is None:
        return None
    payload = verify_jwt_token(credentials.credentials)
    return user_id_from_payload(payload)


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
