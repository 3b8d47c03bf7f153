# ============================================================================
# FILE: app/api/dependencies.py
# JWT authentication dependencies for customers and businesses
# ============================================================================
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from app.config.settings import settings

# ============================================================================
# Security Schemes
# ============================================================================

jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token"
)


class AccountRole(str, enum.Enum):
    USER = "user"
    BUSINESS = "business"


@dataclass(frozen=True)
class CurrentAccount:
    """Caller identity taken from the access token"""
    account_id: UUID
    role: AccountRole


# ============================================================================
# JWT Token Functions
# ============================================================================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Dictionary with claims (should include 'sub' and 'role')
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


# ============================================================================
# Authentication Dependencies
# ============================================================================

def get_current_account(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> CurrentAccount:
    """
    Dependency returning the authenticated caller.

    Usage in routes:
        @router.get("/bookings/user")
        def my_bookings(account: CurrentAccount = Depends(get_current_account)):
            ...

    Raises:
        HTTPException 401: If the token or its claims are invalid
    """
    payload = verify_access_token(credentials.credentials)

    account_id_str: Optional[str] = payload.get("sub")
    if account_id_str is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        account_id = UUID(account_id_str)
        role = AccountRole(payload.get("role"))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid account claims in token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentAccount(account_id=account_id, role=role)


def require_user(
        account: CurrentAccount = Depends(get_current_account)
) -> CurrentAccount:
    """Dependency that requires a customer account"""
    if account.role != AccountRole.USER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer account required"
        )
    return account


def require_business(
        account: CurrentAccount = Depends(get_current_account)
) -> CurrentAccount:
    """Dependency that requires a business account"""
    if account.role != AccountRole.BUSINESS:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Business account required"
        )
    return account
