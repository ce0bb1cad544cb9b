"""
Schémas Pydantic pour l'authentification et le compte courant.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.roles import ALL_ROLES


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Email and password are required")
        return v


class UserResponse(BaseModel):
    """Utilisateur tel qu'exposé par l'API (jamais le hash du mot de passe)."""
    id: uuid.UUID
    email: str
    role: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str
    user: UserResponse


class RegisterRequest(BaseModel):
    """Inscription d'un utilisateur par un administrateur, avec son profil de rôle."""
    email: EmailStr
    password: str
    role: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    # Enseignant
    department_id: Optional[uuid.UUID] = None
    qualification: Optional[str] = None
    # Élève
    class_id: Optional[uuid.UUID] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    # Parent
    relationship: Optional[str] = None
    occupation: Optional[str] = None

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in ALL_ROLES:
            raise ValueError("Invalid role")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Required fields: email, password, role, first_name, last_name")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Required fields: email, password, role, first_name, last_name")
        return v


class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "User registered successfully"
    user: UserResponse
    teacher_id: Optional[uuid.UUID] = None
    student_id: Optional[uuid.UUID] = None
    parent_id: Optional[uuid.UUID] = None


class ProfileUpdate(BaseModel):
    """Champs modifiables par l'utilisateur lui-même."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> str:
        # Colonnes NOT NULL : un null explicite est refusé, l'absence du champ ne l'est pas
        if v is None or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str
