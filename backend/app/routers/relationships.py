"""
Router admin pour les associations :
enseignant ↔ matière ↔ classe, parent ↔ élèves, matière ↔ niveau académique.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_route_group
from app.exceptions import NotFound
from app.schemas.auth import MessageResponse
from app.schemas.relationship import (
    ClassSubjectAssign,
    ClassSubjectResponse,
    ParentStudentUnlink,
    ParentStudentsLink,
    StudentParentResponse,
    SubjectLevelAssign,
    SubjectLevelResponse,
)
from app.services import relationship_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin — associations"],
    dependencies=[Depends(require_route_group("admin"))],
)


# --- Enseignant ↔ matière ↔ classe ---

@router.post("/assign-teacher-subject", response_model=ClassSubjectResponse, status_code=201,
             summary="Assigner un enseignant à une matière dans une classe")
def assign_teacher_subject(data: ClassSubjectAssign, db: Session = Depends(get_db)):
    """
    Contraintes :
    - teacher_id doit désigner un enseignant actif
    - la matière et la classe doivent exister
    - le triplet (classe, matière, enseignant) est unique → 409 sinon
    """
    return relationship_service.assign_teacher_to_subject_class(db, data)


@router.get("/classes/{class_id}/subjects", response_model=List[ClassSubjectResponse],
            summary="Matières et enseignants d'une classe")
def get_class_subjects(class_id: uuid.UUID, db: Session = Depends(get_db)):
    return relationship_service.get_class_subjects(db, class_id)


@router.delete("/class-subjects/{assignment_id}", status_code=204,
               summary="Retirer une assignation enseignant")
def remove_teacher_assignment(assignment_id: uuid.UUID, db: Session = Depends(get_db)):
    if not relationship_service.remove_teacher_assignment(db, assignment_id):
        raise NotFound("Teacher assignment not found")


# --- Parent ↔ élèves ---

@router.post("/parents/link-students", response_model=List[StudentParentResponse], status_code=201,
             summary="Lier un parent à des élèves")
def link_parent_to_students(data: ParentStudentsLink, db: Session = Depends(get_db)):
    """Tout ou rien : si un élève est déjà lié à ce parent, aucun lien n'est créé (409)."""
    return relationship_service.link_parent_to_students(db, data)


@router.post("/parents/unlink-student", response_model=MessageResponse,
             summary="Délier un parent d'un élève")
def unlink_parent_from_student(data: ParentStudentUnlink, db: Session = Depends(get_db)):
    """Idempotent : répond 200 même si le lien n'existait pas."""
    relationship_service.unlink_parent_from_student(db, data.parent_id, data.student_id)
    return MessageResponse(message="Parent unlinked from student successfully")


# --- Matière ↔ niveau académique ---

@router.get("/academic-levels/{level_id}/subjects", response_model=List[SubjectLevelResponse],
            summary="Matières d'un niveau académique")
def get_academic_level_subjects(level_id: uuid.UUID, db: Session = Depends(get_db)):
    return relationship_service.get_academic_level_subjects(db, level_id)


@router.post("/academic-levels/assign-subject", response_model=SubjectLevelResponse, status_code=201,
             summary="Ajouter une matière à un niveau")
def assign_subject_to_academic_level(data: SubjectLevelAssign, db: Session = Depends(get_db)):
    return relationship_service.assign_subject_to_academic_level(db, data)


@router.delete("/academic-levels/subjects/{link_id}", status_code=204,
               summary="Retirer une matière d'un niveau")
def remove_subject_from_academic_level(link_id: uuid.UUID, db: Session = Depends(get_db)):
    if not relationship_service.remove_subject_from_academic_level(db, link_id):
        raise NotFound("Subject is not assigned to this academic level")
