"""
Admin Schemas - Pydantic models for administrator accounts.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from .models import AdminRole


class AdminCreate(BaseModel):
    """
    Admin Creation Schema - Used by an existing admin to add another

    Fields:
    - name: Display name
    - email: Login email, must be unused
    - role: ADMIN (default) or SUPER_ADMIN
    """
    name: str = Field(..., min_length=1)
    email: EmailStr
    role: AdminRole = AdminRole.ADMIN


class AdminResponse(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: AdminRole
    is_initial: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminCreateResponse(BaseModel):
    message: str
    id: int


class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class AdminLoginResponse(BaseModel):
    token: str
    message: str
    role: AdminRole
    is_initial: bool
