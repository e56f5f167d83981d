"""
FastAPI dependencies for authentication and authorization.

Each account type lives in its own table, so tokens carry a ``role`` claim
naming the table their ``id`` belongs to.
"""
import logging
from typing import Optional, Union

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import AuthenticationException, PermissionDeniedException
from ..users.models import User
from ..doctors.models import Doctor
from ..admins.models import Admin
from .security import verify_token, AccountRole, ACCESS_TOKEN_TYPE, PASSWORD_RESET_TOKEN_TYPE

# Set up logging
logger = logging.getLogger(__name__)

# Bearer scheme; missing headers are reported by the dependencies themselves
bearer_scheme = HTTPBearer(auto_error=False)

ACCOUNT_MODELS = {
    AccountRole.USER: User,
    AccountRole.DOCTOR: Doctor,
    AccountRole.ADMIN: Admin,
}


def _decode_bearer(credentials: Optional[HTTPAuthorizationCredentials], token_type: str, role: AccountRole) -> dict:
    """
    Validate the bearer token and check it was issued for ``role``.

    Raises:
        AuthenticationException: If the token is missing, invalid, expired or for another role
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Unauthorized: No token provided")

    payload = verify_token(credentials.credentials)
    if not payload:
        raise AuthenticationException("Unauthorized: Invalid token")

    if payload.get("type") != token_type or payload.get("role") != role.value:
        logger.info(f"Token rejected: expected {token_type}/{role.value}, got {payload.get('type')}/{payload.get('role')}")
        raise AuthenticationException("Unauthorized: Invalid token")

    return payload


def _load_account(payload: dict, role: AccountRole, db: Session):
    account_id = payload.get("id")
    if account_id is None:
        raise AuthenticationException("Unauthorized: Invalid token")

    model = ACCOUNT_MODELS[role]
    account = db.get(model, account_id)
    if account is None:
        raise AuthenticationException(f"Unauthorized: {role.value.capitalize()} not found")
    return account


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from JWT token with database verification.

    Raises:
        AuthenticationException: If token is invalid or user not found
    """
    payload = _decode_bearer(credentials, ACCESS_TOKEN_TYPE, AccountRole.USER)
    return _load_account(payload, AccountRole.USER, db)


def get_current_doctor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Doctor:
    """Authenticated doctor regardless of verification status"""
    payload = _decode_bearer(credentials, ACCESS_TOKEN_TYPE, AccountRole.DOCTOR)
    return _load_account(payload, AccountRole.DOCTOR, db)


def get_current_verified_doctor(current_doctor: Doctor = Depends(get_current_doctor)) -> Doctor:
    """
    Authenticated doctor whose profile has been verified.

    Raises:
        PermissionDeniedException: If the doctor is PENDING or REJECTED
    """
    if not current_doctor.is_verified:
        raise PermissionDeniedException("Doctor profile is not verified")
    return current_doctor


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Admin:
    payload = _decode_bearer(credentials, ACCESS_TOKEN_TYPE, AccountRole.ADMIN)
    return _load_account(payload, AccountRole.ADMIN, db)


def get_current_doctor_or_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Union[Doctor, Admin]:
    """
    Accept either a doctor or an admin session token.

    Callers distinguish the two with ``isinstance``.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Unauthorized: No token provided")

    payload = verify_token(credentials.credentials)
    if not payload or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationException("Unauthorized: Invalid token")

    role = payload.get("role")
    if role == AccountRole.ADMIN.value:
        return _load_account(payload, AccountRole.ADMIN, db)
    if role == AccountRole.DOCTOR.value:
        return _load_account(payload, AccountRole.DOCTOR, db)
    raise AuthenticationException("Unauthorized: Invalid token")


def require_reset_email(role: AccountRole):
    """
    Dependency factory for password reset routes.

    The reset token's email claim is trusted; the account is only re-checked
    for existence.

    Args:
        role: Account table the token must have been issued for

    Returns:
        Function that returns the account named by the token
    """
    model = ACCOUNT_MODELS[role]

    def reset_account_checker(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db)
    ):
        payload = _decode_bearer(credentials, PASSWORD_RESET_TOKEN_TYPE, role)
        email = payload.get("email")
        if not email:
            raise AuthenticationException("Unauthorized: Invalid token")

        account = db.query(model).filter(model.email == email).first()
        if account is None:
            raise AuthenticationException(f"Unauthorized: {role.value.capitalize()} not found")
        return account

    return reset_account_checker


# Convenience dependencies for each account type
get_user_for_reset = require_reset_email(AccountRole.USER)
get_doctor_for_reset = require_reset_email(AccountRole.DOCTOR)
get_admin_for_reset = require_reset_email(AccountRole.ADMIN)
