from pydantic import EmailStr, Field, validator
from typing import Optional
from datetime import datetime
from src.models import UserRole
from src.schemas import CamelModel

class UserBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr

    @validator("email")
    def normalize_email(cls, v):
        return v.lower()

class RegisterRequest(UserBase):
    password: str = Field(..., min_length=6)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str
    # Sign in on this device and end the session held elsewhere
    new_session: bool = False

    @validator("email")
    def normalize_email(cls, v):
        return v.lower()

class UserOut(CamelModel):
    id: int
    name: str
    email: EmailStr
    role: UserRole

class UserProfile(UserOut):
    created_at: datetime
    updated_at: datetime

class AuthResponse(CamelModel):
    status: str = "success"
    token: str
    user: Optional[UserOut] = None
    message: str

class ForgotPasswordRequest(CamelModel):
    email: EmailStr

    @validator("email")
    def normalize_email(cls, v):
        return v.lower()

class ResetPasswordRequest(CamelModel):
    password: str = Field(..., min_length=6)
    confirm_password: str

    @validator("confirm_password")
    def passwords_match(cls, v, values):
        if "password" in values and v != values["password"]:
            raise ValueError("Passwords do not match")
        return v
