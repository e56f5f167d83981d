"""
Doctor Router - API endpoints for doctor registration, login and verification.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, BackgroundTasks, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..admins.models import Admin
from ..core.dependencies import get_current_doctor, get_current_admin, get_doctor_for_reset
from ..core.passwords import request_password_reset, reset_password, change_account_password
from ..core.schemas import (
    ChangePasswordRequest, ForgotPasswordRequest, ForgotPasswordResponse, ResetPasswordRequest, MessageResponse
)
from ..core.security import AccountRole
from ..core.storage import get_storage
from ..notifications.service import NotificationService, get_notification_service
from .models import Doctor, VerificationStatus
from .schemas import (
    DoctorResponse, DoctorCreateResponse, DoctorLogin, DoctorLoginResponse,
    VerificationUpdate, VerificationUpdateResponse
)
from .service import (
    build_registration, create_doctor, get_doctor, list_doctors, login_doctor,
    update_verification_status, verification_notification
)

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/doctors", tags=["Doctors"])


@router.post("", response_model=DoctorCreateResponse, status_code=status.HTTP_201_CREATED)
async def register_doctor(
    background_tasks: BackgroundTasks,
    full_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    credentials: Optional[str] = Form(None),
    specialization: Optional[str] = Form(None, description="JSON array of specializations"),
    current_institution: Optional[str] = Form(None),
    years_of_experience: Optional[str] = Form(None),
    education: Optional[str] = Form(None),
    license_id: Optional[str] = Form(None),
    certifications: Optional[str] = Form(None, description="JSON array"),
    awards: Optional[str] = Form(None, description="JSON array"),
    memberships: Optional[str] = Form(None, description="JSON array"),
    publications: Optional[str] = Form(None, description="JSON array"),
    languages_spoken: Optional[str] = Form(None, description="JSON array"),
    areas_of_interest: Optional[str] = Form(None, description="JSON array"),
    bio: Optional[str] = Form(None),
    links: Optional[str] = Form(None),
    documents: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Register a doctor with credential documents.

    Fields are sent as multipart form data; list fields are JSON-array strings.
    The profile starts PENDING and a welcome email is queued.

    Raises:
        ValidationException: Missing required fields or bad documents (400)
        AlreadyExistsException: Email already registered (409)
    """
    registration = build_registration({
        "full_name": full_name,
        "email": email,
        "credentials": credentials,
        "specialization": specialization,
        "current_institution": current_institution,
        "years_of_experience": years_of_experience,
        "education": education,
        "license_id": license_id,
        "certifications": certifications,
        "awards": awards,
        "memberships": memberships,
        "publications": publications,
        "languages_spoken": languages_spoken,
        "areas_of_interest": areas_of_interest,
        "bio": bio,
        "links": links,
    })

    doctor, uploaded = await create_doctor(db, storage, registration, documents or [])

    notifications.enqueue(
        db,
        background_tasks,
        recipient=doctor.email,
        subject="Welcome to KitaDocs - Registration Successful",
        template_name="doctor_registration",
        context={"full_name": doctor.full_name, "files_uploaded": len(uploaded)}
    )

    return {
        "message": "Doctor created successfully",
        "id": doctor.id,
        "verification_status": doctor.verification_status,
        "files_uploaded": len(uploaded),
        "file_urls": [stored.url for stored in uploaded],
    }


@router.get("", response_model=List[DoctorResponse])
async def get_doctors(
    verification_status: Optional[VerificationStatus] = Query(None, description="Filter by verification status"),
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """List doctors for review, newest first"""
    return list_doctors(db, verification_status)


@router.get("/me", response_model=DoctorResponse)
async def get_my_profile(current_doctor: Doctor = Depends(get_current_doctor)):
    """
    Get the current doctor's profile

    Available to pending doctors too, so they can follow their application.
    """
    return current_doctor


@router.post("/login", response_model=DoctorLoginResponse)
async def login(credentials: DoctorLogin, db: Session = Depends(get_db)):
    """Authenticate a verified doctor"""
    return login_doctor(db, credentials.email, credentials.password)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    current_doctor: Doctor = Depends(get_current_doctor),
    db: Session = Depends(get_db)
):
    """Replace the initial or current password; the account stops being initial"""
    change_account_password(db, current_doctor, data.current_password, data.new_password)
    return {"message": "Password changed successfully"}


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service)
):
    return request_password_reset(
        db, background_tasks, notifications, Doctor, AccountRole.DOCTOR, data.email.lower(), "full_name"
    )


@router.post("/reset-password", response_model=MessageResponse)
async def reset_doctor_password(
    data: ResetPasswordRequest,
    doctor: Doctor = Depends(get_doctor_for_reset),
    db: Session = Depends(get_db)
):
    reset_password(db, doctor, "password", data.new_password, email=data.email)
    return {"message": "Password reset successfully"}


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor_profile(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin)
):
    """Get a doctor's full profile with documents"""
    return get_doctor(db, doctor_id)


@router.put("/{doctor_id}/verification", response_model=VerificationUpdateResponse)
async def change_verification_status(
    doctor_id: int,
    data: VerificationUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Verify or reject a pending doctor.

    The status change is committed before the notification is queued, so a
    failed email never undoes it.

    Raises:
        NotFoundException: Doctor not found (404)
        InvalidStateException: Transition not allowed (409)
    """
    doctor = update_verification_status(db, doctor_id, data.status)
    logger.info(f"Admin {current_admin.id} set doctor {doctor.id} to {doctor.verification_status.value}")

    subject, template_name, context = verification_notification(doctor)
    notifications.enqueue(
        db,
        background_tasks,
        recipient=doctor.email,
        subject=subject,
        template_name=template_name,
        context=context
    )

    return {
        "message": "Doctor verification status updated successfully",
        "id": doctor.id,
        "verification_status": doctor.verification_status,
    }
