"""
Admin service - administrator creation, login and first-admin bootstrap.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.security import (
    AccountRole, generate_initial_password, hash_password, check_account_password, create_access_token
)
from ..exceptions import AlreadyExistsException, NotFoundException, InvalidCredentialsException
from .models import Admin, AdminRole
from .schemas import AdminCreate

# Set up logging
logger = logging.getLogger(__name__)


def create_admin(db: Session, data: AdminCreate) -> Admin:
    """
    Create an admin holding a random initial password.

    The caller is responsible for emailing the credentials.

    Raises:
        AlreadyExistsException: If the email is already registered
    """
    email = data.email.lower()
    if db.query(Admin).filter(Admin.email == email).first():
        raise AlreadyExistsException("Admin with this email already exists")

    admin = Admin(
        name=data.name.strip(),
        email=email,
        password=generate_initial_password(),
        is_initial=True,
        role=data.role
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExistsException("Admin with this email already exists")
    db.refresh(admin)

    logger.info(f"Admin created: {admin.id} ({admin.role.value})")
    return admin


def login_admin(db: Session, email: str, password: str) -> Dict[str, Any]:
    """
    Authenticate an admin.

    Raises:
        NotFoundException: Unknown email
        InvalidCredentialsException: Wrong password
    """
    admin = db.query(Admin).filter(Admin.email == email.lower()).first()
    if admin is None:
        raise NotFoundException("Admin with this email does not exist")

    if not check_account_password(password, admin.password, admin.is_initial):
        logger.warning(f"Failed login for admin {admin.id}")
        raise InvalidCredentialsException("Invalid password")

    token = create_access_token(admin.id, AccountRole.ADMIN)
    message = "Login successful. Please change your password." if admin.is_initial else "Login successful"
    logger.info(f"Admin logged in: {admin.id}")
    return {"token": token, "message": message, "role": admin.role, "is_initial": admin.is_initial}


def create_bootstrap_admin(
    db: Session,
    email: Optional[str],
    password: Optional[str],
    name: str = "System Administrator"
) -> Optional[Admin]:
    """
    Create the first admin account from environment variables.

    Does nothing when credentials are not configured or any admin exists.

    Args:
        db: Database session
        email: Admin email from environment
        password: Admin password from environment
        name: Admin display name

    Returns:
        The created admin, or None when nothing was created
    """
    if not email or not password:
        logger.info("Bootstrap admin credentials not configured; skipping")
        return None

    existing_admin = db.query(Admin).first()
    if existing_admin:
        logger.info("Bootstrap admin skipped: an admin already exists")
        return None

    admin = Admin(
        name=name,
        email=email.lower(),
        password=hash_password(password),
        is_initial=False,
        role=AdminRole.SUPER_ADMIN
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Bootstrap admin creation lost a race with another process")
        return None
    db.refresh(admin)

    logger.info(f"Bootstrap admin created successfully: {admin.id}")
    return admin
