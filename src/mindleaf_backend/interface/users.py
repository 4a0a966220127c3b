from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from mindleaf_backend.interface.base import BaseEntityGet
from mindleaf_backend.model.auth import UserRole

class UserRegister(BaseModel):
    name: Optional[str] = Field(None, max_length=255, description="Display name")
    email: EmailStr = Field(description="Login email address")
    password: str = Field(min_length=1, description="Plain text password, stored hashed")

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if v else v

class UserGet(BaseEntityGet):
    id: int = Field(description="User identifier")
    name: Optional[str] = Field(None, description="Display name")
    email: str = Field(description="Login email address")
    role: UserRole = Field(description="STUDENT, CREATOR or ADMIN")

class UserUpgradeResponse(BaseModel):
    message: str
    user: UserGet

class PasswordResetTokenResponse(BaseModel):
    message: str
    reset_token: str
    reset_path: str
    expires_at: datetime

class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class LoginResponse(BaseModel):
    token: str
    user: UserGet

class PasswordResetRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1)
