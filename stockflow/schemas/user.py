"""User schemas for request/response validation."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base user schema."""
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class SignUpRequest(UserBase):
    """Schema for self sign-up. Accounts start inactive."""
    password: str = Field(..., min_length=6)


class UserCreate(UserBase):
    """Schema for creating a user (admin)."""
    password: str = Field(..., min_length=6)
    is_admin: bool = False
    is_active: bool = True


class UserActiveUpdate(BaseModel):
    """Schema for activating or deactivating a user."""
    is_active: bool


class UserSummary(BaseModel):
    """Minimal user info embedded in other responses."""
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True


class UserResponse(UserBase):
    """Schema for user response."""
    id: str
    is_admin: bool
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    """JWT token schema."""
    access_token: str
    token_type: str
    user: UserResponse
