"""
Admin routes - administrator accounts and notification job management.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, BackgroundTasks, Query, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..core.dependencies import get_current_admin, get_admin_for_reset
from ..core.passwords import request_password_reset, reset_password, change_account_password
from ..core.schemas import (
    ChangePasswordRequest, ForgotPasswordRequest, ForgotPasswordResponse, ResetPasswordRequest, MessageResponse
)
from ..core.security import AccountRole
from ..notifications.models import NotificationStatus
from ..notifications.schemas import NotificationJobResponse
from ..notifications.service import NotificationService, get_notification_service
from .models import Admin
from .schemas import AdminCreate, AdminCreateResponse, AdminLogin, AdminLoginResponse, AdminResponse
from .service import create_admin, login_admin

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admins", tags=["Admins"])


@router.post("", response_model=AdminCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_admin(
    data: AdminCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Create another administrator and email their initial credentials.

    Raises:
        AlreadyExistsException: Email already registered (409)
    """
    admin = create_admin(db, data)
    logger.info(f"Admin {current_admin.id} created admin {admin.id}")

    notifications.enqueue(
        db,
        background_tasks,
        recipient=admin.email,
        subject="Your KitaDocs administrator account",
        template_name="admin_welcome",
        context={"name": admin.name, "email": admin.email, "initial_password": admin.password}
    )
    return {"message": "Admin created successfully", "id": admin.id}


@router.get("/me", response_model=AdminResponse)
async def get_me(current_admin: Admin = Depends(get_current_admin)):
    return current_admin


@router.post("/login", response_model=AdminLoginResponse)
async def login(credentials: AdminLogin, db: Session = Depends(get_db)):
    """Authenticate an administrator"""
    return login_admin(db, credentials.email, credentials.password)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    change_account_password(db, current_admin, data.current_password, data.new_password)
    return {"message": "Password changed successfully"}


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service)
):
    return request_password_reset(
        db, background_tasks, notifications, Admin, AccountRole.ADMIN, data.email.lower(), "name"
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_admin_password(
    data: ResetPasswordRequest,
    admin: Admin = Depends(get_admin_for_reset),
    db: Session = Depends(get_db)
):
    reset_password(db, admin, "password", data.new_password, email=data.email)
    return {"message": "Password reset successfully"}


@router.get("/notifications", response_model=List[NotificationJobResponse])
async def list_notifications(
    job_status: Optional[NotificationStatus] = Query(None, alias="status", description="Filter by delivery status"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    """List queued, sent and failed notification jobs"""
    return notifications.list_jobs(db, job_status)


@router.post("/notifications/{job_id}/retry", response_model=NotificationJobResponse)
async def retry_notification(
    job_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Re-queue a failed or pending notification.

    Raises:
        NotFoundException: Job not found (404)
        InvalidStateException: Job already sent (409)
    """
    return notifications.retry(db, background_tasks, job_id)
