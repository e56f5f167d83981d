"""
Doctor Service - Business logic for doctor registration, login and verification.

This module provides service functions for the doctor lifecycle: multipart
registration with credential documents, the PENDING -> VERIFIED | REJECTED
verification workflow, and the notifications each step triggers.
"""
import json
import logging
from typing import List, Optional, Dict, Any, Tuple

from fastapi import UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from starlette.concurrency import run_in_threadpool

from ..core.security import AccountRole, generate_initial_password, check_account_password, create_access_token
from ..core.storage import StoredFile, read_upload, validate_documents, discard_uploads
from ..exceptions import (
    AlreadyExistsException, NotFoundException, InvalidCredentialsException,
    PermissionDeniedException, InvalidStateException, ValidationException
)
from .models import Doctor, DoctorDocument, VerificationStatus
from .schemas import DoctorRegistration

# Set up logging
logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "full_name", "email", "credentials", "specialization", "current_institution",
    "years_of_experience", "education", "license_id"
)
LIST_FIELDS = (
    "specialization", "certifications", "awards", "memberships", "publications",
    "languages_spoken", "areas_of_interest"
)


def parse_list_field(value: Optional[str]) -> List[str]:
    """
    Decode a JSON-array form field.

    Anything that is not a JSON array decodes to an empty list.
    """
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Error parsing JSON field: {value[:100]}")
        return []
    if not isinstance(parsed, list):
        return []
    return [str(item) for item in parsed]


def build_registration(fields: Dict[str, Any]) -> DoctorRegistration:
    """
    Turn raw multipart fields into a validated registration.

    Args:
        fields: Form field values as received (strings or None)

    Returns:
        DoctorRegistration: Validated data

    Raises:
        ValidationException: If a required field is missing or a value is invalid
    """
    data = {key: (value.strip() if isinstance(value, str) else value) for key, value in fields.items()}
    for name in LIST_FIELDS:
        data[name] = parse_list_field(data.get(name))

    try:
        data["years_of_experience"] = int(data.get("years_of_experience") or 0)
    except (TypeError, ValueError):
        data["years_of_experience"] = 0

    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        logger.warning(f"Doctor registration missing fields: {', '.join(missing)}")
        raise ValidationException("Missing required fields")

    try:
        return DoctorRegistration(**data)
    except ValidationError as e:
        logger.warning(f"Doctor registration rejected: {e.errors()}")
        raise ValidationException("Invalid doctor registration data")


async def create_doctor(
    db: Session,
    storage,
    registration: DoctorRegistration,
    documents: List[UploadFile]
) -> Tuple[Doctor, List[StoredFile]]:
    """
    Register a doctor and upload their credential documents.

    Every file is validated and read before the first upload. If the database
    insert fails, uploaded objects are removed again.

    Args:
        db: Database session
        storage: Object storage backend
        registration: Validated registration data
        documents: Uploaded credential files

    Returns:
        Tuple of the new doctor and the stored files

    Raises:
        AlreadyExistsException: If the email is already registered
        ValidationException: If the documents break the count or size limits
    """
    email = registration.email.lower()
    if db.query(Doctor).filter(Doctor.email == email).first():
        raise AlreadyExistsException("Doctor with this email already exists")

    validate_documents(documents)
    contents = [(file, await read_upload(file)) for file in documents]

    uploaded: List[StoredFile] = []
    try:
        for file, content in contents:
            stored = await run_in_threadpool(
                storage.upload, content, "doctor-document", file.filename, file.content_type
            )
            uploaded.append(stored)
    except Exception:
        discard_uploads(storage, uploaded)
        raise

    doctor = Doctor(
        **registration.model_dump(exclude={"email"}),
        email=email,
        password=generate_initial_password(),
        is_initial=True,
        verification_status=VerificationStatus.PENDING
    )
    doctor.documents = [
        DoctorDocument(
            document_url=stored.url,
            public_id=stored.public_id,
            document_type=stored.content_type or "verification_document"
        )
        for stored in uploaded
    ]
    db.add(doctor)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        discard_uploads(storage, uploaded)
        raise AlreadyExistsException("Doctor with this email already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to save doctor {email}; removing {len(uploaded)} uploaded files")
        discard_uploads(storage, uploaded)
        raise
    db.refresh(doctor)

    logger.info(f"Doctor registered: {doctor.id} with {len(uploaded)} documents")
    return doctor, uploaded


def get_doctor(db: Session, doctor_id: int) -> Doctor:
    """
    Get a doctor profile by ID.

    Raises:
        NotFoundException: If doctor not found
    """
    doctor = (
        db.query(Doctor)
        .options(selectinload(Doctor.documents))
        .filter(Doctor.id == doctor_id)
        .first()
    )
    if not doctor:
        raise NotFoundException("Doctor not found")
    return doctor


def list_doctors(db: Session, verification_status: Optional[VerificationStatus] = None) -> List[Doctor]:
    query = db.query(Doctor).options(selectinload(Doctor.documents))
    if verification_status is not None:
        query = query.filter(Doctor.verification_status == verification_status)
    return query.order_by(Doctor.created_at.desc(), Doctor.id.desc()).all()


def login_doctor(db: Session, email: str, password: str) -> Dict[str, Any]:
    """
    Authenticate a doctor.

    Only VERIFIED doctors may log in. Doctors still holding their initial
    password are checked against it directly.

    Raises:
        NotFoundException: Unknown email
        PermissionDeniedException: Doctor is PENDING or REJECTED
        InvalidCredentialsException: Wrong password
    """
    doctor = db.query(Doctor).filter(Doctor.email == email.lower()).first()
    if doctor is None:
        raise NotFoundException("Doctor not found")

    if doctor.verification_status == VerificationStatus.PENDING:
        raise PermissionDeniedException("Doctor profile is still under review")
    if doctor.verification_status == VerificationStatus.REJECTED:
        raise PermissionDeniedException("Doctor profile has been rejected")

    if not check_account_password(password, doctor.password, doctor.is_initial):
        logger.warning(f"Failed login for doctor {doctor.id}")
        raise InvalidCredentialsException("Invalid password" if doctor.is_initial else "Invalid email or password")

    token = create_access_token(doctor.id, AccountRole.DOCTOR)
    logger.info(f"Doctor logged in: {doctor.id}")
    return {"doctor": doctor, "token": token, "is_initial": doctor.is_initial}


def update_verification_status(db: Session, doctor_id: int, new_status: VerificationStatus) -> Doctor:
    """
    Move a doctor along the verification state machine.

    Raises:
        NotFoundException: If doctor not found
        InvalidStateException: If the transition is not allowed
    """
    doctor = get_doctor(db, doctor_id)
    current = doctor.verification_status

    if not doctor.can_transition_to(new_status):
        raise InvalidStateException(
            f"Cannot change verification status from {current.value} to {new_status.value}"
        )

    doctor.verification_status = new_status
    db.commit()
    db.refresh(doctor)
    logger.info(f"Doctor {doctor.id} verification status changed from {current.value} to {new_status.value}")
    return doctor


def verification_notification(doctor: Doctor) -> Tuple[str, str, Dict[str, Any]]:
    """
    Pick the email for a doctor's new verification status.

    Returns:
        Tuple of subject, template name and template context
    """
    if doctor.verification_status == VerificationStatus.VERIFIED:
        context = {
            "full_name": doctor.full_name,
            "email": doctor.email,
            "initial_password": doctor.password if doctor.is_initial else None,
        }
        return "Your KitaDocs profile has been verified", "doctor_verified", context

    return (
        "Update on your KitaDocs application",
        "doctor_rejected",
        {"full_name": doctor.full_name}
    )
