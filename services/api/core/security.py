"""
Security and Authentication Module

This module implements bearer token authentication for the API:
- JWT token generation and validation
- Bearer token extraction from the Authorization header
- Current-user dependency for protected routes

Industry Standards:
    - JWT (RFC 7519) for stateless authentication
    - Bearer token authentication (RFC 6750)

Login, refresh and password handling live in the identity service that
issues these tokens; this API only verifies them.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import settings

logger = logging.getLogger(__name__)

# HTTP Bearer Token Authentication Scheme
# ======================================
# Client sends: Authorization: Bearer <jwt_token>
# FastAPI automatically extracts and validates the Bearer format
security = HTTPBearer(
    scheme_name="JWT Bearer Token",  # Name shown in OpenAPI/Swagger docs
    description="Access token issued by the identity service",
    auto_error=True,  # Automatically reject requests without a token
)


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT Access Token (RFC 7519 Compliant)

    Generates a signed JWT token for stateless authentication.
    Token structure: header.payload.signature (base64url encoded)

    Args:
        data: Claims to encode in token payload
              Common claims: {"sub": user_id, "email": "...", "roles": [...]}
        expires_delta: Optional custom expiration time (overrides default)

    Returns:
        str: Complete JWT token string (3 parts separated by dots)

    Example:
        >>> token = create_access_token({"sub": "user_123", "roles": ["Admin"]})

    Security Notes:
        - Tokens are signed but NOT encrypted (don't store sensitive data)
        - Keep access tokens short-lived
    """
    to_encode = data.copy()

    issued_at = datetime.now(timezone.utc)
    if expires_delta:
        expire = issued_at + expires_delta
    else:
        expire = issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # Standard JWT claims (RFC 7519 registered claims)
    to_encode.update(
        {
            "exp": expire,       # Expiration time (Unix timestamp)
            "iat": issued_at,    # Issued at time (for audit trails)
            "type": "access",    # Token type (distinguish from refresh tokens)
        }
    )

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and Validate JWT Token

    Performs signature verification, expiration check and algorithm
    verification in a single ``jwt.decode`` call.

    Args:
        token: JWT token string to decode (without "Bearer " prefix)

    Returns:
        Dict[str, Any]: Decoded token payload containing user claims

    Raises:
        HTTPException: 401 Unauthorized if token is invalid, expired, or tampered
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],  # Prevents algorithm confusion
        )

    except JWTError as e:
        # Log for security monitoring, but don't expose details to client
        logger.warning("JWT validation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",  # Generic message
            headers={"WWW-Authenticate": "Bearer"},   # RFC 6750 compliance
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict[str, Any]:
    """
    FastAPI Dependency: Extract and Validate Current User from JWT Token

    Args:
        credentials: HTTP authorization credentials (automatically injected by FastAPI)

    Returns:
        Dict[str, Any]: User data from token payload (user id, email, roles)

    Raises:
        HTTPException: 401 Unauthorized if token is missing, invalid, or expired

    Usage in Route Handlers:
        ```python
        @router.get("/kpi/dashboard")
        def dashboard(current_user: dict = Depends(get_current_user)):
            ...
        ```
    """
    payload = decode_access_token(credentials.credentials)

    # "sub" is the standard claim; "userId" is what the identity service issues
    user_id = payload.get("sub") or payload.get("userId")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload
