"""
Security module for verifying JWT tokens and authenticating users.

Sessions are issued by the external identity provider; this service only
verifies the bearer token and exposes the caller as an opaque AuthUser.
"""

import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from app.config import settings

# Logger
logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer()


@dataclass
class AuthUser:
    """
    Authenticated user from JWT claims.
    The tracker never stores users; it only needs to know who is calling.
    """
    id: str  # Identity provider user ID (sub claim)
    email: Optional[str]
    raw_claims: Dict[str, Any]


async def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Dict[str, Any]:
    """
    Verify the JWT token and return the payload.
    """
    token = credentials.credentials

    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET not set. Authentication cannot proceed.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server authentication configuration error"
        )

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False}
        )
        return payload
    except JWTError as e:
        logger.warning(f"JWT Verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_auth_user(
    payload: Dict[str, Any] = Depends(get_token_payload)
) -> AuthUser:
    """
    Get the authenticated user from JWT claims.
    This is the primary authentication dependency.
    """
    user_id = payload.get("sub")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject claim"
        )

    return AuthUser(
        id=str(user_id),
        email=payload.get("email"),
        raw_claims=payload
    )


def create_access_token(subject: str, email: Optional[str] = None, **claims: Any) -> str:
    """
    Mint a token the way the identity provider does.
    Used by local tooling and tests; production tokens come from the provider.
    """
    payload = {"sub": str(subject), "role": "authenticated", **claims}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
