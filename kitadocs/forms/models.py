"""
Assessment Form Models - LLM-generated knowledge assessments, one per doctor.
"""
import enum
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from ..database import Base


class FormStatus(str, enum.Enum):
    """Lifecycle of an assessment form"""
    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"


class QuestionStatus(str, enum.Enum):
    """Progress on a single assessment question"""
    PENDING = "PENDING"
    ANSWERED = "ANSWERED"
    SKIPPED = "SKIPPED"


class Form(Base):
    """
    Form Model - Assessment generated for a doctor

    Fields:
    - id: Primary key
    - doctor_id: Owning doctor; unique, so a doctor has at most one form
    - status: PENDING until the doctor submits it
    - submitted_at: When the form was submitted
    """
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), unique=True, nullable=False)
    status = Column(Enum(FormStatus), nullable=False, default=FormStatus.PENDING)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    doctor = relationship("Doctor", back_populates="form")
    questions = relationship(
        "FormQuestion",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="FormQuestion.id"
    )

    def __repr__(self):
        return f"<Form(id={self.id}, doctor_id={self.doctor_id}, status='{self.status}')>"


class FormQuestion(Base):
    """A single question on an assessment form"""
    __tablename__ = "form_questions"

    id = Column(Integer, primary_key=True, index=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(Text, nullable=False)
    status = Column(Enum(QuestionStatus), nullable=False, default=QuestionStatus.PENDING)

    form = relationship("Form", back_populates="questions")

    def __repr__(self):
        return f"<FormQuestion(id={self.id}, form_id={self.form_id}, status='{self.status}')>"
