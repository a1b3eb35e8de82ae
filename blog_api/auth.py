"""Authentication utilities for JWT, password hashing and the access gate."""

import os
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from dotenv import load_dotenv

from blog_api.database import get_db
from blog_api.models import User

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError("JWT_SECRET_KEY must be set in .env file")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60

# HTTP Bearer for JWT authentication; missing headers are reported by the gate
security = HTTPBearer(auto_error=False)


class TokenState(str, Enum):
    MISSING = "missing"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """The caller proven by a valid bearer token."""

    id: int
    username: str


@dataclass(frozen=True)
class AuthContext:
    """Per-request authentication result handed to route handlers."""

    state: TokenState
    identity: Optional[AuthenticatedIdentity] = None


def _truncate(password: str) -> str:
    # Bcrypt has a 72-byte limit
    password_bytes = password.encode('utf-8')[:72]
    return password_bytes.decode('utf-8', errors='ignore')


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Bcrypt has a maximum password length of 72 bytes. Passwords longer than
    this are truncated to prevent errors.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    logger.debug("Hashing password")
    return pwd_context.hash(_truncate(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to verify against

    Returns:
        bool: True if password matches, False otherwise
    """
    logger.debug("Verifying password")
    return pwd_context.verify(_truncate(plain_password), hashed_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT carrying the user id.

    Args:
        user_id: Id of the authenticated user
        expires_delta: Token lifetime, one hour when omitted

    Returns:
        str: Encoded JWT token
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"id": user_id, "iat": now, "exp": expire}

    logger.info(f"Creating access token for user id: {user_id}")
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token string

    Returns:
        Optional[dict]: Decoded token payload or None if invalid or expired
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[ALGORITHM])
        logger.debug("Token decoded successfully")
        return payload
    except JWTError as e:
        logger.warning(f"Token decode error: {e}")
        return None


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> AuthContext:
    """
    Classify the bearer token of the current request.

    Args:
        credentials: HTTP Authorization credentials, None if the header is absent
        db: Database session

    Returns:
        AuthContext: Token state and, when valid, the caller's identity
    """
    if credentials is None:
        return AuthContext(state=TokenState.MISSING)

    payload = decode_token(credentials.credentials)
    if payload is None:
        return AuthContext(state=TokenState.INVALID)

    user_id = payload.get("id")
    if not isinstance(user_id, int):
        logger.warning("Token missing id claim")
        return AuthContext(state=TokenState.INVALID)

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"User not found for token: {user_id}")
        return AuthContext(state=TokenState.INVALID)

    return AuthContext(
        state=TokenState.VALID,
        identity=AuthenticatedIdentity(id=user.id, username=user.username)
    )


def get_current_identity(context: AuthContext = Depends(get_auth_context)) -> AuthenticatedIdentity:
    """
    Dependency for protected routes; requires a valid bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if context.state is TokenState.MISSING:
        logger.warning("Request without bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if context.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.debug(f"User authenticated: {context.identity.id}")
    return context.identity
