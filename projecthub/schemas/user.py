from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from projecthub.config.security import SecurityConfig
from projecthub.models.user import UserRole

PASSWORD_MIN_LENGTH = SecurityConfig.PASSWORDS['min_length']


class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    role: Optional[UserRole] = None

    @field_validator('username')
    @classmethod
    def username_must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError('Username cannot be blank')
        return v.strip()


class UserCreate(UserRegister):
    """Admin-created account; any role allowed"""
    role: UserRole = UserRole.DEVELOPER


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole

    model_config = {
        "from_attributes": True
    }


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class UserWithCounts(UserOut):
    projects: int = 0
    tasks: int = 0


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    role: Optional[UserRole] = None

    model_config = {
        "from_attributes": True
    }
