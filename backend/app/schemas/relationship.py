"""
Schémas Pydantic pour les associations : enseignant ↔ matière ↔ classe,
parent ↔ élèves, matière ↔ niveau académique.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel


# --- Enseignant ↔ matière ↔ classe ---

class ClassSubjectAssign(BaseModel):
    teacher_id: uuid.UUID
    subject_id: uuid.UUID
    class_id: uuid.UUID


class TeacherSummary(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class SubjectSummary(BaseModel):
    id: uuid.UUID
    name: str
    code: str

    model_config = {"from_attributes": True}


class ClassSummary(BaseModel):
    id: uuid.UUID
    name: str
    level: str

    model_config = {"from_attributes": True}


class ClassSubjectResponse(BaseModel):
    """Assignation enrichie des champs d'affichage enseignant, matière et classe."""
    id: uuid.UUID
    teacher: TeacherSummary
    subject: SubjectSummary
    school_class: ClassSummary


# --- Parent ↔ élèves ---

class ParentStudentsLink(BaseModel):
    """La liste vide est refusée par le service (ValidationError), pas par le schéma."""
    parent_id: uuid.UUID
    student_ids: List[uuid.UUID]


class ParentStudentUnlink(BaseModel):
    parent_id: uuid.UUID
    student_id: uuid.UUID


class StudentParentResponse(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    student_id: uuid.UUID

    model_config = {"from_attributes": True}


class ChildResponse(BaseModel):
    """Enfant lié au parent connecté."""
    id: uuid.UUID
    student_number: str
    first_name: str
    last_name: str
    email: str
    class_id: Optional[uuid.UUID] = None
    class_name: Optional[str] = None


# --- Matière ↔ niveau académique ---

class SubjectLevelAssign(BaseModel):
    academic_level_id: uuid.UUID
    subject_id: uuid.UUID
    is_required: bool = True


class SubjectLevelResponse(BaseModel):
    id: uuid.UUID
    academic_level_id: uuid.UUID
    is_required: bool
    subject: SubjectSummary


class StudentSubjectResponse(BaseModel):
    """Matière du niveau de la classe de l'élève, avec l'enseignant assigné s'il existe."""
    subject_id: uuid.UUID
    subject_name: str
    subject_code: str
    department_name: Optional[str] = None
    is_required: bool
    teacher_name: Optional[str] = None
    class_name: str
