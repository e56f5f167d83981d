"""
Form Schemas - Pydantic models for assessment forms and the LLM reply they are built from.
"""
from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
from .models import FormStatus, QuestionStatus


class GeneratedQuestion(BaseModel):
    question: str = Field(..., min_length=1)


class GeneratedForm(BaseModel):
    """Shape the model is asked to reply with"""
    questions: List[GeneratedQuestion] = Field(..., min_length=1)


class FormGenerateRequest(BaseModel):
    """
    Form Generation Schema

    Fields:
    - doctor_id: Target doctor; required for admins, ignored for doctors
    - specialization: Overrides the doctor's registered specializations in the prompt
    - years_of_experience: Overrides the registered experience in the prompt
    """
    doctor_id: Optional[int] = None
    specialization: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)


class FormQuestionResponse(BaseModel):
    id: int
    question: str
    status: QuestionStatus

    class Config:
        from_attributes = True


class FormDoctor(BaseModel):
    id: int
    full_name: str
    email: str

    class Config:
        from_attributes = True


class FormResponse(BaseModel):
    """
    Form Response Schema - A form with its questions

    Fields:
    - id / doctor_id: Identity
    - status: PENDING or SUBMITTED
    - submitted_at: Set once the doctor submits
    - questions: Ordered questions with their progress
    """
    id: int
    doctor_id: int
    status: FormStatus
    created_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    questions: List[FormQuestionResponse] = []

    class Config:
        from_attributes = True


class FormSummaryResponse(BaseModel):
    """Form listing entry with its doctor"""
    id: int
    doctor_id: int
    status: FormStatus
    created_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    doctor: FormDoctor

    class Config:
        from_attributes = True


class QuestionStatusUpdate(BaseModel):
    status: QuestionStatus
