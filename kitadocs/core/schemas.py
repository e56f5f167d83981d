"""
Request and response schemas shared by the user, doctor and admin routers.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str


class ForgotPasswordRequest(BaseModel):
    """
    Forgot Password Schema - Starts the password reset flow

    Fields:
    - email: Address of the account to reset
    """
    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    message: str
    note: str


class ResetPasswordRequest(BaseModel):
    """
    Reset Password Schema - Sent with a password reset bearer token

    Fields:
    - email: Optional; when present it must match the token's email
    - new_password: Replacement password
    """
    email: Optional[EmailStr] = None
    new_password: str = Field(..., min_length=8)


class ChangePasswordRequest(BaseModel):
    """
    Change Password Schema - Authenticated password change

    Fields:
    - current_password: Initial or current password
    - new_password: Replacement password
    """
    current_password: str
    new_password: str = Field(..., min_length=8)
