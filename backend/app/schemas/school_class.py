"""
Schémas Pydantic pour les classes scolaires.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ClassCreate(BaseModel):
    name: str
    academic_level_id: uuid.UUID
    level: Optional[str] = None
    class_teacher_id: Optional[uuid.UUID] = None
    capacity: int = 40

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Class name is required")
        return v.strip()

    @field_validator("capacity")
    @classmethod
    def capacity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Capacity must be positive")
        return v


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    level: Optional[str] = None
    class_teacher_id: Optional[uuid.UUID] = None
    capacity: Optional[int] = None
    academic_level_id: Optional[uuid.UUID] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Class name is required")
        return v.strip() if v else v


class ClassResponse(BaseModel):
    id: uuid.UUID
    name: str
    level: str
    class_teacher_id: Optional[uuid.UUID] = None
    capacity: int
    academic_level_id: Optional[uuid.UUID] = None
    academic_level_name: Optional[str] = None
    nb_students: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
