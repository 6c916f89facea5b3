"""
Identity token handling.

Users are authenticated by an upstream identity provider which issues a
bearer JWT. This module only extracts the verified user identifier.
"""
import jwt

from app.core import config
from app.core.errors import Unauthenticated


def verify_jwt_token(token: str) -> dict:
    """
    Decode a bearer JWT and return its payload.
    
    Args:
        token: JWT token from Authorization header
        
    Returns:
        Decoded JWT payload containing user information
        
    Raises:
        Unauthenticated: If token is invalid or expired
    """
    try:
        if config.JWT_SECRET:
            return jwt.decode(
                token,
                config.JWT_SECRET,
                algorithms=[config.JWT_ALGORITHM],
                options={"verify_aud": False},
            )
        # The identity provider signs its own tokens; trust the signature and check expiry
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True}
        )
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated(f"Invalid token: {exc}") from exc


def user_id_from_payload(payload: dict) -> str:
    """Extract the user identifier (``sub``, or ``userId`` for older tokens)."""
    user_id = payload.get("sub") or payload.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise Unauthenticated("Invalid token payload")
    return user_id
