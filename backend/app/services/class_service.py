"""
Service métier pour la gestion des classes scolaires.
Les matières et enseignants d'une classe sont gérés par relationship_service.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app import roles
from app.database import commit_or_conflict
from app.exceptions import NotFound, ValidationError
from app.models.academic import AcademicLevel
from app.models.profile import Student
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.school_class import ClassCreate, ClassResponse, ClassUpdate

logger = logging.getLogger(__name__)

NAME_TAKEN = "Class with this name already exists"


def create_class(db: Session, data: ClassCreate) -> ClassResponse:
    """
    Crée une nouvelle classe rattachée à un niveau académique.
    Lève un Conflict si le nom existe déjà.
    """
    _check_references(db, data.academic_level_id, data.class_teacher_id)

    school_class = SchoolClass(
        name=data.name,
        level=data.level or "",
        class_teacher_id=data.class_teacher_id,
        capacity=data.capacity,
        academic_level_id=data.academic_level_id,
    )
    db.add(school_class)
    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(school_class)
    logger.info("Classe créée : %s", school_class.name)
    return _to_response(db, school_class)


def get_classes(db: Session) -> list[ClassResponse]:
    """Retourne toutes les classes, triées par nom."""
    classes = db.execute(
        select(SchoolClass).order_by(SchoolClass.name)
    ).scalars().all()
    return [_to_response(db, c) for c in classes]


def get_class(db: Session, class_id: uuid.UUID) -> Optional[ClassResponse]:
    """Retourne une classe par son ID, ou None si inexistante."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None
    return _to_response(db, school_class)


def update_class(db: Session, class_id: uuid.UUID, data: ClassUpdate) -> Optional[ClassResponse]:
    """Met à jour les champs fournis d'une classe."""
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    _check_references(db, update_data.get("academic_level_id"), update_data.get("class_teacher_id"))

    for field, value in update_data.items():
        setattr(school_class, field, value)

    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(school_class)
    return _to_response(db, school_class)


def delete_class(db: Session, class_id: uuid.UUID) -> bool:
    """
    Supprime une classe. Les assignations enseignant/matière suivent en cascade,
    les élèves restent sans classe.
    Retourne True si supprimé, False si introuvable.
    """
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        return False

    db.delete(school_class)
    db.commit()
    return True


def _check_references(db: Session, academic_level_id, class_teacher_id) -> None:
    if academic_level_id is not None and db.get(AcademicLevel, academic_level_id) is None:
        raise NotFound("Academic level not found")

    if class_teacher_id is not None:
        teacher = db.get(User, class_teacher_id)
        if teacher is None:
            raise NotFound("Class teacher not found")
        if teacher.role != roles.TEACHER:
            raise ValidationError("Class teacher must have the teacher role")


def _to_response(db: Session, school_class: SchoolClass) -> ClassResponse:
    """Construit le schéma de réponse avec le niveau et le nombre d'élèves."""
    nb_students = db.execute(
        select(func.count())
        .select_from(Student)
        .where(Student.class_id == school_class.id)
    ).scalar() or 0

    level_name = None
    if school_class.academic_level_id is not None:
        level = db.get(AcademicLevel, school_class.academic_level_id)
        level_name = level.name if level else None

    return ClassResponse(
        id=school_class.id,
        name=school_class.name,
        level=school_class.level,
        class_teacher_id=school_class.class_teacher_id,
        capacity=school_class.capacity,
        academic_level_id=school_class.academic_level_id,
        academic_level_name=level_name,
        nb_students=nb_students,
        created_at=school_class.created_at,
        updated_at=school_class.updated_at,
    )
