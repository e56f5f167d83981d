"""
Form Router - API endpoints for doctor assessment forms.
"""
from typing import List, Union
from fastapi import APIRouter, Depends, BackgroundTasks, status
from sqlalchemy.orm import Session
import logging

from ..database import get_db
from ..admins.models import Admin
from ..doctors.models import Doctor
from ..core.dependencies import get_current_admin, get_current_doctor, get_current_doctor_or_admin
from ..core.llm import get_llm_client
from ..exceptions import ValidationException, PermissionDeniedException
from ..notifications.service import NotificationService, get_notification_service
from .schemas import FormGenerateRequest, FormResponse, FormSummaryResponse, FormQuestionResponse, QuestionStatusUpdate
from .service import generate_form, get_form_for_doctor, list_forms, update_question_status, submit_form

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/forms", tags=["Forms"])


@router.post("/generate", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def generate(
    data: FormGenerateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    account: Union[Doctor, Admin] = Depends(get_current_doctor_or_admin),
    llm=Depends(get_llm_client),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Generate an assessment form.

    Doctors generate their own form; admins must name the doctor.

    Raises:
        NotFoundException: Doctor not found (404)
        AlreadyExistsException: Form already exists for this doctor (409)
        ExternalServiceException: Generation failed (500)
    """
    if isinstance(account, Doctor):
        if data.doctor_id is not None and data.doctor_id != account.id:
            raise PermissionDeniedException("Doctors can only generate their own form")
        doctor_id = account.id
    else:
        if data.doctor_id is None:
            raise ValidationException("doctor_id is required")
        doctor_id = data.doctor_id

    form = await generate_form(db, llm, doctor_id, data.specialization, data.years_of_experience)

    notifications.enqueue(
        db,
        background_tasks,
        recipient=form.doctor.email,
        subject="New assessment form available - KitaDocs",
        template_name="form_generated",
        context={"full_name": form.doctor.full_name, "question_count": len(form.questions)}
    )
    return form


@router.get("", response_model=List[FormSummaryResponse])
async def get_forms(db: Session = Depends(get_db), current_admin: Admin = Depends(get_current_admin)):
    """List every form with its doctor"""
    return list_forms(db)


@router.get("/doctor/{doctor_id}", response_model=FormResponse)
async def get_doctor_form(
    doctor_id: int,
    db: Session = Depends(get_db),
    account: Union[Doctor, Admin] = Depends(get_current_doctor_or_admin)
):
    """Get a doctor's form with its questions; doctors may only read their own"""
    if isinstance(account, Doctor) and account.id != doctor_id:
        raise PermissionDeniedException("You can only view your own form")
    return get_form_for_doctor(db, doctor_id)


@router.put("/questions/{question_id}/status", response_model=FormQuestionResponse)
async def change_question_status(
    question_id: int,
    data: QuestionStatusUpdate,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor)
):
    return update_question_status(db, current_doctor, question_id, data.status)


@router.post("/{form_id}/submit", response_model=FormResponse)
async def submit(
    form_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_doctor: Doctor = Depends(get_current_doctor),
    notifications: NotificationService = Depends(get_notification_service)
):
    """
    Submit the doctor's form.

    Raises:
        InvalidStateException: Form already submitted (409)
    """
    form = submit_form(db, current_doctor, form_id)

    notifications.enqueue(
        db,
        background_tasks,
        recipient=current_doctor.email,
        subject="Assessment submission received - KitaDocs",
        template_name="form_submitted",
        context={"full_name": current_doctor.full_name, "form_id": form.id}
    )
    return form
