"""
Bootstrap utilities for first admin creation.
Handles automatic creation of the first admin from environment variables.
"""
import logging
from sqlalchemy.orm import Session

from ..admins.service import create_bootstrap_admin
from ..config import settings

logger = logging.getLogger(__name__)


def bootstrap_admin_if_needed(db: Session) -> bool:
    """
    Create the first admin when none exists and bootstrap credentials are set.

    Args:
        db: Database session

    Returns:
        bool: True if an admin was created
    """
    try:
        admin = create_bootstrap_admin(
            db,
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
            name=settings.bootstrap_admin_name
        )
    finally:
        db.close()
    return admin is not None
