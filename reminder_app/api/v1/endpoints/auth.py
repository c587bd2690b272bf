from datetime import timedelta
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from reminder_app import crud
from reminder_app.api import deps
from reminder_app.core import security
from reminder_app.core.config import settings
from reminder_app.models.user import User
from reminder_app.schemas.user import AuthResponse, LoginRequest, User as UserSchema, UserCreate

router = APIRouter()


def _issue_tokens(user: User) -> AuthResponse:
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return AuthResponse(
        access_token=security.create_access_token(user.id, expires_delta=access_token_expires),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserSchema.model_validate(user),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create new user and log them in.
    """
    user = crud.user.get_by_email(db, email=user_in.email)
    if user:
        raise HTTPException(
            status_code=400,
            detail="A user with this email already exists.",
        )
    user = crud.user.create(db, obj_in=user_in)
    return _issue_tokens(user)


@router.post("/login", response_model=AuthResponse)
def login(
    *,
    db: Session = Depends(deps.get_db),
    credentials: LoginRequest,
) -> Any:
    """
    Exchange email and password for a bearer token.
    """
    user = crud.user.authenticate(db, email=credentials.email, password=credentials.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not crud.user.is_active(user):
        raise HTTPException(status_code=400, detail="Inactive user")
    return _issue_tokens(user)


@router.get("/me", response_model=UserSchema)
def read_users_me(
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Get current user.
    """
    return current_user
