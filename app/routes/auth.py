"""
FastAPI routes for registration, login and the current account.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas import AuthResponse, LoginRequest, MessageResponse, PrivateUserOut, RegisterRequest
from app.security import create_access_token, get_current_user_id
from app.services.users import authenticate, create_user, get_user, user_to_dict

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Create an account and return it with a bearer token.

    Duplicate email or username is rejected with 400.
    """
    user = create_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
    )
    return AuthResponse(
        message="User created successfully",
        user=user_to_dict(user, include_email=True),
        token=create_access_token(user.id),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    user = authenticate(db, payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        user=user_to_dict(user, include_email=True),
        token=create_access_token(user.id),
    )


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=PrivateUserOut)
def me(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return user_to_dict(get_user(db, user_id), include_email=True)
