from pydantic import BaseModel, field_validator
from typing import Optional

from .base import CamelModel


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPublic(CamelModel):
    id: int
    email: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: UserPublic


class VerifyResponse(BaseModel):
    valid: bool
    user: Optional[UserPublic] = None


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("New password must be at least 8 characters")
        if len(v.encode("utf-8")) > 72:
            # bcrypt only considers the first 72 bytes
            raise ValueError("New password cannot exceed 72 bytes")
        return v


class ChangePasswordResponse(BaseModel):
    success: bool
    message: str


class UploadResponse(CamelModel):
    success: bool
    file_url: str
    file_name: str
