"""
User routes - reader registration, login, profile and password reset.
"""
from fastapi import APIRouter, Depends, BackgroundTasks, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..core.dependencies import get_current_user, get_user_for_reset
from ..core.passwords import request_password_reset, reset_password
from ..core.schemas import ForgotPasswordRequest, ForgotPasswordResponse, ResetPasswordRequest, MessageResponse
from ..core.security import AccountRole
from ..notifications.service import NotificationService, get_notification_service
from .models import User
from .schemas import UserRegistration, UserLogin, RegisterResponse, UserLoginResponse, UserProfileResponse
from .service import register_user, login_user, get_user_profile

# Set up logging
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegistration, db: Session = Depends(get_db)):
    """
    Register a new reader account.

    Returns:
        Confirmation message and the new user's id

    Raises:
        AlreadyExistsException: If the email is already registered (409)
    """
    user = register_user(db, data)
    return {"message": "User registered successfully", "id": user.id}


@router.post("/login", response_model=UserLoginResponse)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Authenticate a reader and return the user with a session token"""
    return login_user(db, credentials.email, credentials.password)


@router.get("/profile", response_model=UserProfileResponse)
async def profile(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return the authenticated user's profile with bookmarked articles"""
    return get_user_profile(db, current_user)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service)
):
    """Email a password reset link to a registered user"""
    return request_password_reset(
        db, background_tasks, notifications, User, AccountRole.USER, data.email.lower(), "first_name"
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_user_password(
    data: ResetPasswordRequest,
    user: User = Depends(get_user_for_reset),
    db: Session = Depends(get_db)
):
    """
    Set a new password using a password reset bearer token.

    Raises:
        AuthenticationException: If the reset token is missing, invalid or expired (401)
    """
    reset_password(db, user, "password_hash", data.new_password, email=data.email)
    return {"message": "Password reset successfully"}
