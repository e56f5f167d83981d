"""
User Schemas - Pydantic models for reader accounts.
"""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from ..articles.schemas import ArticleResponse


class UserRegistration(BaseModel):
    """
    User Registration Schema - Used for reader self-registration

    Fields:
    - first_name / last_name: User's name
    - email: Login email, must be unused
    - password: Plain text password (hashed before storage)
    """
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User data without the password hash"""
    id: int
    first_name: str
    last_name: str
    email: EmailStr
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    message: str
    id: int


class UserLoginResponse(BaseModel):
    user: UserResponse
    token: str


class UserProfileResponse(UserResponse):
    """User data together with the articles they bookmarked"""
    bookmarked_articles: List[ArticleResponse] = []
