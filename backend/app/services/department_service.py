"""
Service métier pour les départements.
"""

import uuid
import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app import roles
from app.database import commit_or_conflict
from app.exceptions import NotFound, ValidationError
from app.models.academic import Department, Subject
from app.models.user import User
from app.schemas.academic import DepartmentCreate, DepartmentResponse, DepartmentUpdate, HodSummary

logger = logging.getLogger(__name__)

NAME_TAKEN = "Department with this name already exists"


def get_departments(db: Session) -> list[DepartmentResponse]:
    """Retourne tous les départements, triés par nom, avec leur chef et leur nombre de matières."""
    departments = db.execute(
        select(Department).order_by(Department.name)
    ).scalars().all()
    return [to_response(db, d) for d in departments]


def create_department(db: Session, data: DepartmentCreate) -> DepartmentResponse:
    if data.hod_id is not None:
        _check_hod(db, data.hod_id)

    department = Department(name=data.name, description=data.description, hod_id=data.hod_id)
    db.add(department)
    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(department)
    logger.info("Département créé : %s", department.name)
    return to_response(db, department)


def update_department(db: Session, department_id: uuid.UUID, data: DepartmentUpdate) -> DepartmentResponse:
    department = db.get(Department, department_id)
    if department is None:
        raise NotFound("Department not found")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("hod_id") is not None:
        _check_hod(db, update_data["hod_id"])

    for field, value in update_data.items():
        setattr(department, field, value)

    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(department)
    return to_response(db, department)


def delete_department(db: Session, department_id: uuid.UUID) -> bool:
    department = db.get(Department, department_id)
    if department is None:
        return False
    db.delete(department)
    db.commit()
    return True


def to_response(db: Session, department: Department) -> DepartmentResponse:
    """Construit le schéma de réponse avec le chef de département et le compteur de matières."""
    hod = db.get(User, department.hod_id) if department.hod_id else None
    nb_subjects = db.execute(
        select(func.count())
        .select_from(Subject)
        .where(Subject.department_id == department.id)
    ).scalar() or 0

    return DepartmentResponse(
        id=department.id,
        name=department.name,
        description=department.description,
        hod_id=department.hod_id,
        hod=HodSummary.model_validate(hod) if hod else None,
        nb_subjects=nb_subjects,
        created_at=department.created_at,
    )


def _check_hod(db: Session, hod_id: uuid.UUID) -> None:
    """Le chef de département doit être un utilisateur de rôle hod."""
    hod = db.get(User, hod_id)
    if hod is None:
        raise NotFound("User not found")
    if hod.role != roles.HOD:
        raise ValidationError("Head of department must have the hod role")
