"""
Form Service - Generation, retrieval and submission of doctor assessment forms.

Questions are produced by an LLM from the doctor's specialization and
experience. The reply must contain a JSON object with a ``questions`` list;
anything else is reported as a generation failure without retrying.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..core.llm import extract_json
from ..doctors.models import Doctor
from ..exceptions import (
    AlreadyExistsException, NotFoundException, PermissionDeniedException,
    InvalidStateException, ExternalServiceException
)
from .models import Form, FormQuestion, FormStatus, QuestionStatus
from .schemas import GeneratedForm

# Set up logging
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a medical examiner. Respond with ONLY valid JSON. No additional text before or after the JSON."

PROMPT_TEMPLATE = """You are a medical board examiner creating a challenging knowledge assessment for a {specialization} specialist with {experience} years of experience. Create tough, clinical questions that test their actual medical knowledge and expertise.

Generate questions that:
- Test deep clinical knowledge and decision-making
- Present complex case scenarios requiring expert analysis
- Assess their knowledge of current research and guidelines
- Include differential diagnosis questions
- Ask about drug interactions, contraindications and complications
- Cover rare conditions and atypical presentations

These are expertise tests, not patient education questions.

You MUST respond with ONLY valid JSON in this exact format:
{{
  "questions": [
    {{"question": "A 45-year-old patient presents with chest pain. ECG shows ST elevation in leads II, III, aVF. What is your differential diagnosis and immediate management plan?"}}
  ]
}}

Generate 15-20 challenging questions specific to {specialization}, progressively harder.

IMPORTANT: Return ONLY the JSON object, no additional text or explanation."""

FORM_STRUCTURE_ERROR = "Failed to generate valid form structure"


def build_prompt(specialization: str, years_of_experience: int) -> str:
    return PROMPT_TEMPLATE.format(specialization=specialization, experience=years_of_experience)


def parse_generated_questions(reply: Optional[str]) -> List[str]:
    """
    Extract question texts from an LLM reply.

    Raises:
        ExternalServiceException: If the reply has no usable ``questions`` list
    """
    try:
        parsed = GeneratedForm.model_validate(extract_json(reply))
    except (ValueError, ValidationError) as e:
        logger.error(f"Could not parse generated form: {str(e)}")
        raise ExternalServiceException(FORM_STRUCTURE_ERROR)
    questions = [item.question.strip() for item in parsed.questions]
    questions = [text for text in questions if text]
    if not questions:
        logger.error("Generated form contained only blank questions")
        raise ExternalServiceException(FORM_STRUCTURE_ERROR)
    return questions


def form_exists_for_doctor(db: Session, doctor_id: int) -> bool:
    return db.query(Form.id).filter(Form.doctor_id == doctor_id).first() is not None


async def generate_form(
    db: Session,
    llm,
    doctor_id: int,
    specialization: Optional[str] = None,
    years_of_experience: Optional[int] = None
) -> Form:
    """
    Generate and store an assessment form for a doctor.

    Args:
        db: Database session
        llm: Completion client with an async ``complete(prompt, system_prompt)``
        doctor_id: Doctor the form is for
        specialization: Optional override for the prompt
        years_of_experience: Optional override for the prompt

    Returns:
        Form: The saved form with its questions

    Raises:
        NotFoundException: Doctor not found
        AlreadyExistsException: The doctor already has a form
        ExternalServiceException: The LLM call failed or returned no usable questions
    """
    doctor = db.get(Doctor, doctor_id)
    if doctor is None:
        raise NotFoundException("Doctor not found")

    if form_exists_for_doctor(db, doctor_id):
        raise AlreadyExistsException("Form already exists for this doctor")

    specialization = specialization or ", ".join(doctor.specialization or []) or "general medicine"
    experience = years_of_experience if years_of_experience is not None else doctor.years_of_experience

    logger.info(f"Generating assessment form for doctor {doctor_id} ({specialization}, {experience} years)")
    reply = await llm.complete(build_prompt(specialization, experience), system_prompt=SYSTEM_PROMPT)
    questions = parse_generated_questions(reply)

    form = Form(doctor_id=doctor_id, status=FormStatus.PENDING)
    form.questions = [FormQuestion(question=text, status=QuestionStatus.PENDING) for text in questions]
    db.add(form)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the form between the check and the insert
        db.rollback()
        raise AlreadyExistsException("Form already exists for this doctor")
    db.refresh(form)

    logger.info(f"Form {form.id} created for doctor {doctor_id} with {len(questions)} questions")
    return form


def get_form_for_doctor(db: Session, doctor_id: int) -> Form:
    form = (
        db.query(Form)
        .options(selectinload(Form.questions))
        .filter(Form.doctor_id == doctor_id)
        .first()
    )
    if form is None:
        raise NotFoundException("Form not found")
    return form


def list_forms(db: Session) -> List[Form]:
    return (
        db.query(Form)
        .options(selectinload(Form.doctor))
        .order_by(Form.created_at.desc(), Form.id.desc())
        .all()
    )


def update_question_status(db: Session, doctor: Doctor, question_id: int, status: QuestionStatus) -> FormQuestion:
    """
    Change the progress of one question on the doctor's own form.

    Raises:
        NotFoundException: Question not found
        PermissionDeniedException: Question belongs to another doctor's form
        InvalidStateException: Form was already submitted
    """
    question = db.get(FormQuestion, question_id)
    if question is None:
        raise NotFoundException("Question not found")
    if question.form.doctor_id != doctor.id:
        raise PermissionDeniedException("You can only update questions on your own form")
    if question.form.status == FormStatus.SUBMITTED:
        raise InvalidStateException("Form already submitted")

    question.status = status
    db.commit()
    db.refresh(question)
    return question


def submit_form(db: Session, doctor: Doctor, form_id: int) -> Form:
    """
    Mark the doctor's form as submitted.

    Raises:
        NotFoundException: Form not found
        PermissionDeniedException: Form belongs to another doctor
        InvalidStateException: Form was already submitted
    """
    form = db.get(Form, form_id)
    if form is None:
        raise NotFoundException("Form not found")
    if form.doctor_id != doctor.id:
        raise PermissionDeniedException("You can only submit your own form")
    if form.status == FormStatus.SUBMITTED:
        raise InvalidStateException("Form already submitted")

    form.status = FormStatus.SUBMITTED
    form.submitted_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(form)

    logger.info(f"Form {form.id} submitted by doctor {doctor.id}")
    return form
