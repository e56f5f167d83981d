"""
Doctor Model - Stores doctor identity, professional profile and verification state.

Doctors register with uploaded credential documents and stay PENDING until an
administrator verifies or rejects them.
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Text, Enum, func
from sqlalchemy.orm import relationship
from ..database import Base


class VerificationStatus(str, enum.Enum):
    """Doctor account gate controlling login and article authoring"""
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


# Allowed verification transitions; VERIFIED and REJECTED are terminal
VERIFICATION_TRANSITIONS = {
    VerificationStatus.PENDING: {VerificationStatus.VERIFIED, VerificationStatus.REJECTED},
    VerificationStatus.VERIFIED: set(),
    VerificationStatus.REJECTED: set(),
}


class Doctor(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key
    - full_name / email: Identity; email is unique
    - password: Initial password as issued while is_initial is True, bcrypt hash afterwards
    - is_initial: Whether the doctor still uses the issued password
    - credentials, specialization, current_institution, years_of_experience,
      education, license_id: Required professional details
    - certifications, awards, memberships, publications, languages_spoken,
      areas_of_interest: Optional lists stored as JSON
    - bio / links: Optional free text
    - verification_status: PENDING, VERIFIED or REJECTED
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    is_initial = Column(Boolean, nullable=False, default=True)
    credentials = Column(String, nullable=False)
    specialization = Column(JSON, nullable=False, default=list)
    current_institution = Column(String, nullable=False)
    years_of_experience = Column(Integer, nullable=False)
    education = Column(String, nullable=False)
    certifications = Column(JSON, nullable=False, default=list)
    awards = Column(JSON, nullable=False, default=list)
    memberships = Column(JSON, nullable=False, default=list)
    publications = Column(JSON, nullable=False, default=list)
    languages_spoken = Column(JSON, nullable=False, default=list)
    areas_of_interest = Column(JSON, nullable=False, default=list)
    bio = Column(Text, nullable=True)
    links = Column(String, nullable=True)
    license_id = Column(String, nullable=False)
    verification_status = Column(
        Enum(VerificationStatus), nullable=False, default=VerificationStatus.PENDING, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    documents = relationship("DoctorDocument", back_populates="doctor", cascade="all, delete-orphan")
    form = relationship("Form", back_populates="doctor", uselist=False, cascade="all, delete-orphan")
    articles = relationship("Article", back_populates="doctor", cascade="all, delete-orphan")

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, email='{self.email}', status='{self.verification_status}')>"

    @property
    def is_verified(self) -> bool:
        """Check if the doctor may log in and publish"""
        return self.verification_status == VerificationStatus.VERIFIED

    def can_transition_to(self, status: VerificationStatus) -> bool:
        """Check whether moving to ``status`` is a valid verification transition"""
        current = self.verification_status or VerificationStatus.PENDING
        return status in VERIFICATION_TRANSITIONS[current]


class DoctorDocument(Base):
    """Credential document uploaded at registration and kept in object storage"""
    __tablename__ = "doctor_documents"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    document_url = Column(String, nullable=False)
    document_type = Column(String, nullable=False, default="verification_document")
    public_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    doctor = relationship("Doctor", back_populates="documents")

    def __repr__(self):
        return f"<DoctorDocument(id={self.id}, doctor_id={self.doctor_id}, type='{self.document_type}')>"
