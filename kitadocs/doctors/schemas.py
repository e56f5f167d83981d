"""
Doctor Schemas - Pydantic models for doctor profile data validation and serialization.

Registration arrives as multipart form fields; ``DoctorRegistration`` is built
from those fields once list values have been decoded.
"""
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from .models import VerificationStatus


class DoctorRegistration(BaseModel):
    """
    Doctor Registration Schema - Validated registration data

    Required:
    - full_name, email, credentials, specialization (non-empty),
      current_institution, years_of_experience (> 0), education, license_id

    Optional lists default to empty; bio and links may be omitted.
    """
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    credentials: str = Field(..., min_length=1)
    specialization: List[str] = Field(..., min_length=1)
    current_institution: str = Field(..., min_length=1)
    years_of_experience: int = Field(..., gt=0)
    education: str = Field(..., min_length=1)
    license_id: str = Field(..., min_length=1)
    certifications: List[str] = []
    awards: List[str] = []
    memberships: List[str] = []
    publications: List[str] = []
    languages_spoken: List[str] = []
    areas_of_interest: List[str] = []
    bio: Optional[str] = None
    links: Optional[str] = None


class DoctorDocumentResponse(BaseModel):
    id: int
    document_url: str
    document_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DoctorResponse(BaseModel):
    """
    Doctor Response Schema - Full doctor profile without the password

    Fields:
    - id / full_name / email: Identity
    - professional details and list fields as registered
    - verification_status: PENDING, VERIFIED or REJECTED
    - is_initial: Whether the issued password is still in use
    - documents: Uploaded credential documents
    """
    id: int
    full_name: str
    email: EmailStr
    credentials: str
    specialization: List[str] = []
    current_institution: str
    years_of_experience: int
    education: str
    certifications: List[str] = []
    awards: List[str] = []
    memberships: List[str] = []
    publications: List[str] = []
    languages_spoken: List[str] = []
    areas_of_interest: List[str] = []
    bio: Optional[str] = None
    links: Optional[str] = None
    license_id: str
    verification_status: VerificationStatus
    is_initial: bool
    documents: List[DoctorDocumentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DoctorCreateResponse(BaseModel):
    message: str
    id: int
    verification_status: VerificationStatus
    files_uploaded: int
    file_urls: List[str]


class DoctorLogin(BaseModel):
    email: EmailStr
    password: str


class DoctorSummary(BaseModel):
    """Identity returned on login"""
    id: int
    full_name: str
    email: EmailStr
    verification_status: VerificationStatus
    is_initial: bool

    class Config:
        from_attributes = True


class DoctorLoginResponse(BaseModel):
    doctor: DoctorSummary
    token: str
    is_initial: bool


class VerificationUpdate(BaseModel):
    """
    Verification Update Schema - Admin decision on a pending doctor

    Fields:
    - status: VERIFIED or REJECTED
    """
    status: VerificationStatus


class VerificationUpdateResponse(BaseModel):
    message: str
    id: int
    verification_status: VerificationStatus
