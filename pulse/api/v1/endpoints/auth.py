"""
Authentication Endpoints Module

This module provides authentication endpoints for user registration, login, and logout.
The system supports both JWT bearer token authentication and HTTP-only cookie-based
authentication for browser clients.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from datetime import timedelta
from pulse.db.session import get_db
from pulse.models.user import User, UserRole
from pulse.core.security import verify_password, get_password_hash, create_access_token
from pulse.core.config import settings
from pulse.schemas.auth import Token, UserRegister
from pulse.schemas.user import UserRead

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserRead)
def register_user(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user account.

    The password is hashed before storage. New users get the USER role.

    Raises:
        HTTPException 400: If a user with this email already exists
    """
    # Check if email is already registered
    user = db.exec(select(User).where(User.email == user_in.email)).first()
    if user:
        raise HTTPException(
            status_code=400,
            detail="User with this email already exists."
        )

    # Create new user with hashed password
    db_user = User(
        email=user_in.email,
        password=get_password_hash(user_in.password),
        full_name=user_in.full_name,
        roles=[UserRole.USER]  # Default role for new registrations
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user

@router.post("/login", response_model=Token)
def login(response: Response, db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Authenticate a user and issue an access token.

    The token is returned in the body and also set as an HTTP-only cookie for
    browser clients. OAuth2PasswordRequestForm uses the 'username' field, which
    carries the email.

    Raises:
        HTTPException 401: If credentials are invalid
    """
    # Look up user by email (form_data.username contains the email)
    user = db.exec(select(User).where(User.email == form_data.username)).first()

    # Verify user exists and password is correct
    if not user or not verify_password(form_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Generate JWT access token with configurable expiration
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        subject=user.email, expires_delta=access_token_expires
    )

    # httponly keeps the token away from JavaScript, samesite="lax" limits CSRF
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,  # Convert minutes to seconds
        samesite="lax"
    )

    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/logout")
def logout(response: Response):
    """
    Log out the current user by clearing their authentication cookie.

    API clients can simply discard their token.
    """
    response.delete_cookie("access_token")
    return {"status": "success", "detail": "Logged out"}
