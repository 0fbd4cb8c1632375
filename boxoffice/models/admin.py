# boxoffice/models/admin.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

MIN_PASSWORD_LENGTH = 8


class AdminCreate(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError("Username is required")
        return v.strip()

    @field_validator("email")
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("password")
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v


class Admin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str
    email: str
    role: str = "admin"
    isActive: bool = True
    createdAt: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str

    @field_validator("newPassword")
    def validate_new_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    email: Optional[str] = None
