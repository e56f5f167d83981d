"""
Core security utilities for authentication and password handling.
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import secrets
import logging

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
PASSWORD_RESET_TOKEN_TYPE = "password_reset"


class AccountRole(str, Enum):
    """Account tables a token can point at."""
    USER = "user"
    DOCTOR = "doctor"
    ADMIN = "admin"


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        str: Hashed password
    """
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        bool: True if password matches hash
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Not a recognised hash, e.g. an initial password that was never hashed
        return False

def generate_initial_password() -> str:
    """
    Generate the one-time password issued to new doctor and admin accounts.

    Returns:
        str: 32 character hex string
    """
    return secrets.token_hex(16)

def check_account_password(candidate: str, stored_password: Optional[str], is_initial: bool) -> bool:
    """
    Check a password for accounts that may still hold an initial password.

    Initial passwords are stored as issued and compared directly; every
    other password is a bcrypt hash.

    Args:
        candidate: Password supplied by the caller
        stored_password: Value stored on the account
        is_initial: Whether the account still uses its issued password

    Returns:
        bool: True if the password matches
    """
    if not stored_password:
        return False
    if is_initial:
        # TODO: hash initial passwords at issue time and drop this plaintext comparison
        return secrets.compare_digest(candidate.encode(), stored_password.encode())
    return verify_password(candidate, stored_password)

def create_access_token(account_id: int, role: AccountRole, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT session token.

    Args:
        account_id: Primary key of the account in its own table
        role: Which account table the id refers to
        expires_delta: Token expiration time (default: ACCESS_TOKEN_EXPIRE_DAYS)

    Returns:
        str: Encoded JWT token
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta is not None
        else timedelta(days=settings.access_token_expire_days)
    )
    to_encode = {
        "id": account_id,
        "role": role.value,
        "type": ACCESS_TOKEN_TYPE,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def create_password_reset_token(email: str, role: AccountRole, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a short-lived token bound to an email address.

    Args:
        email: Email of the account being reset
        role: Which account table the email belongs to
        expires_delta: Token expiration time (default: PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)

    Returns:
        str: Encoded JWT token
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta is not None
        else timedelta(minutes=settings.password_reset_token_expire_minutes)
    )
    to_encode = {
        "email": email,
        "role": role.value,
        "type": PASSWORD_RESET_TOKEN_TYPE,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string

    Returns:
        Dict containing token payload if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload
    except JWTError as e:
        logger.info(f"Rejected token: {str(e)}")
        return None
