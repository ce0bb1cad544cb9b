"""
Schémas Pydantic pour départements, matières et niveaux académiques.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


def _strip_required(v: str) -> str:
    if not v.strip():
        raise ValueError("Le champ ne peut pas être vide.")
    return v.strip()


# --- Départements ---

class DepartmentCreate(BaseModel):
    name: str
    description: Optional[str] = None
    hod_id: Optional[uuid.UUID] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _strip_required(v)


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    hod_id: Optional[uuid.UUID] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


class HodSummary(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class DepartmentResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    hod_id: Optional[uuid.UUID] = None
    hod: Optional[HodSummary] = None
    nb_subjects: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# --- Matières ---

class SubjectCreate(BaseModel):
    name: str
    code: str
    department_id: Optional[uuid.UUID] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("code")
    @classmethod
    def code_upper(cls, v: str) -> str:
        return _strip_required(v).upper()


class SubjectUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    department_id: Optional[uuid.UUID] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v

    @field_validator("code")
    @classmethod
    def code_upper(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v).upper() if v is not None else v


class SubjectResponse(BaseModel):
    id: uuid.UUID
    name: str
    code: str
    department_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# --- Niveaux académiques ---

class AcademicLevelCreate(BaseModel):
    name: str
    description: Optional[str] = None
    display_order: int = 0

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _strip_required(v)


class AcademicLevelUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    display_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return _strip_required(v) if v is not None else v


class AcademicLevelResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    display_order: int = 0
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
