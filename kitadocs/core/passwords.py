"""
Password reset and password change flows shared by every account type.
"""
import logging
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import NotFoundException, PermissionDeniedException, InvalidCredentialsException
from .security import AccountRole, create_password_reset_token, hash_password, check_account_password

# Set up logging
logger = logging.getLogger(__name__)

# TODO: align this note with PASSWORD_RESET_TOKEN_EXPIRE_MINUTES once the frontend copy is updated
RESET_LINK_NOTE = "Please check your email and click the link within 15 minutes"


def build_reset_link(role: AccountRole, token: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/{role.value}/reset-password?token={token}"


def request_password_reset(
    db: Session,
    background_tasks: BackgroundTasks,
    notifications,
    model,
    role: AccountRole,
    email: str,
    display_name_attr: str
) -> dict:
    """
    Issue a reset token for the account with ``email`` and queue the reset email.

    Args:
        db: Database session
        background_tasks: Request background task queue
        notifications: NotificationService used to queue the email
        model: Account model class to look the email up in
        role: Role claim for the reset token
        email: Address supplied by the caller
        display_name_attr: Attribute used to greet the account holder

    Returns:
        dict: Acknowledgement message and note

    Raises:
        NotFoundException: If no account has that email
    """
    account = db.query(model).filter(model.email == email).first()
    if account is None:
        raise NotFoundException(f"{role.value.capitalize()} with this email does not exist")

    token = create_password_reset_token(account.email, role)
    notifications.enqueue(
        db,
        background_tasks,
        recipient=account.email,
        subject="Password Reset Request - KitaDocs",
        template_name="password_reset",
        context={
            "name": getattr(account, display_name_attr, "") or account.email,
            "reset_link": build_reset_link(role, token),
            "expires_minutes": settings.password_reset_token_expire_minutes,
        }
    )
    logger.info(f"Password reset requested for {role.value} {account.id}")
    return {"message": "Password reset link sent to your email", "note": RESET_LINK_NOTE}


def reset_password(db: Session, account, password_attr: str, new_password: str,
                   email: Optional[str] = None) -> None:
    """
    Store a new hashed password for the account named by a reset token.

    Raises:
        PermissionDeniedException: If ``email`` is given and is not the token's account
    """
    if email is not None and email.lower() != account.email.lower():
        raise PermissionDeniedException("You are not authorized to reset this password")

    setattr(account, password_attr, hash_password(new_password))
    if hasattr(account, "is_initial"):
        account.is_initial = False
    db.commit()
    logger.info(f"Password reset completed for {account.__class__.__name__.lower()} {account.id}")


def change_account_password(db: Session, account, current_password: str, new_password: str) -> None:
    """
    Replace an initial or current password after checking the old one.

    Raises:
        InvalidCredentialsException: If ``current_password`` does not match
    """
    if not check_account_password(current_password, account.password, account.is_initial):
        raise InvalidCredentialsException("Invalid current password")

    account.password = hash_password(new_password)
    account.is_initial = False
    db.commit()
    logger.info(f"Password changed for {account.__class__.__name__.lower()} {account.id}")
