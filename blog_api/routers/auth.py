"""Authentication router for user signup and login."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.database import get_db
from blog_api.models import User
from blog_api.schemas import UserSignup, UserLogin, LoginResponse, MessageResponse
from blog_api.auth import hash_password, verify_password, create_access_token

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

# Checked against when the email is unknown so both login failures cost one bcrypt round
DUMMY_PASSWORD_HASH = hash_password("dummy-password-for-unknown-users")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def signup(user_data: UserSignup, db: Session = Depends(get_db)):
    """
    Register a new user.

    Args:
        user_data: User signup data (username, email, password)
        db: Database session

    Returns:
        MessageResponse: Confirmation message

    Raises:
        HTTPException: If the email or username is already registered
    """
    logger.info(f"Signup attempt for email: {user_data.email}")

    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        logger.warning(f"Signup failed: Email already exists - {user_data.email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already in use"
        )

    existing_user = db.query(User).filter(User.username == user_data.username).first()
    if existing_user:
        logger.warning(f"Signup failed: Username already exists - {user_data.username}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already taken"
        )

    new_user = User(
        username=user_data.username,
        email=user_data.email,
        password_hash=hash_password(user_data.password)
    )

    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent signup with the same email or username
        db.rollback()
        logger.warning(f"Signup failed: Integrity error - {user_data.email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email or username already in use"
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Signup failed for {user_data.email}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal Server Error"
        )

    logger.info(f"User registered successfully: {user_data.email}")
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """
    Authenticate user and return JWT token.

    Unknown emails and wrong passwords produce the same error.

    Args:
        user_data: User login data (email, password)
        db: Database session

    Returns:
        LoginResponse: JWT token and public user identity

    Raises:
        HTTPException: If credentials are invalid
    """
    logger.info(f"Login attempt for email: {user_data.email}")

    invalid_credentials = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid credentials"
    )

    user = db.query(User).filter(User.email == user_data.email).first()
    if not user:
        verify_password(user_data.password, DUMMY_PASSWORD_HASH)
        logger.warning(f"Login failed: User not found - {user_data.email}")
        raise invalid_credentials

    if not verify_password(user_data.password, user.password_hash):
        logger.warning(f"Login failed: Invalid password - {user_data.email}")
        raise invalid_credentials

    token = create_access_token(user.id)

    logger.info(f"User logged in successfully: {user_data.email}")
    return {"token": token, "user": {"id": user.id, "username": user.username}}
