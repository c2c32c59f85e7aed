from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime

from maxcontrol.modules.auth.models import UserRole


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    full_name: Optional[str] = Field(None, max_length=200)
    role: UserRole = UserRole.SALES

    @field_validator('username')
    @classmethod
    def normalize_username(cls, v):
        v = v.strip()
        if ' ' in v:
            raise ValueError('El nombre de usuario no puede contener espacios')
        return v


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(UserBase):
    # Si no se envía, se conserva la contraseña actual
    password: Optional[str] = Field(None, min_length=6)


class UserOut(BaseModel):
    id: UUID
    username: str
    full_name: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserOut


class AuthContext(BaseModel):
    """Identidad del usuario que realiza la operación"""
    user_id: UUID
    username: str
    full_name: Optional[str] = None
    role: UserRole
