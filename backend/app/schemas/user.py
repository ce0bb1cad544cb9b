"""
Schémas Pydantic pour la gestion des utilisateurs par l'administrateur.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from app.roles import ALL_ROLES


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("email", "role", "first_name", "last_name", "is_active")
    @classmethod
    def not_null(cls, v):
        # Colonnes NOT NULL : omettre le champ le laisse inchangé, null est refusé
        if v is None:
            raise ValueError("Field cannot be null")
        return v

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
            raise ValueError("Field cannot be empty")
        return v.strip()


class DepartmentRef(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class TeacherResponse(BaseModel):
    """Enseignant aplati : champs utilisateur + profil enseignant."""
    id: uuid.UUID  # ID utilisateur
    profile_id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    employee_number: str
    qualification: Optional[str] = None
    hire_date: Optional[date] = None
    department: Optional[DepartmentRef] = None


class StudentResponse(BaseModel):
    """Élève aplati : profil élève + champs utilisateur + classe."""
    id: uuid.UUID  # ID du profil élève
    user_id: uuid.UUID
    student_number: str
    first_name: str
    last_name: str
    email: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    enrollment_date: Optional[date] = None
    class_id: Optional[uuid.UUID] = None
    class_name: Optional[str] = None
    created_at: Optional[datetime] = None
