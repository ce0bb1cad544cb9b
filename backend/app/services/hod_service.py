"""
Service métier du chef de département (HOD).

Toutes les lectures et écritures sont limitées au département dont l'utilisateur
connecté est le chef : le département est résolu d'abord, puis chaque requête
est contrainte par department_id. Une écriture visant un autre département est
refusée, jamais redirigée vers celui de l'appelant.
"""

import uuid
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import commit_or_conflict
from app.exceptions import Forbidden, NotFound
from app.models.academic import Department, Subject
from app.models.profile import Teacher
from app.models.user import User
from app.schemas.academic import DepartmentResponse, SubjectCreate, SubjectResponse, SubjectUpdate
from app.schemas.user import DepartmentRef, TeacherResponse
from app.services import department_service
from app.services.subject_service import CODE_TAKEN

logger = logging.getLogger(__name__)


def get_own_department(db: Session, user: User):
    """Département dont l'utilisateur est le chef, ou None."""
    return db.execute(
        select(Department).where(Department.hod_id == user.id)
    ).scalar()


def get_my_department(db: Session, user: User) -> DepartmentResponse:
    department = get_own_department(db, user)
    if department is None:
        raise NotFound("Department not found")
    return department_service.to_response(db, department)


def list_department_subjects(db: Session, user: User) -> list[SubjectResponse]:
    department = _require_department(db, user)
    subjects = db.execute(
        select(Subject)
        .where(Subject.department_id == department.id)
        .order_by(Subject.name)
    ).scalars().all()
    return [SubjectResponse.model_validate(s) for s in subjects]


def create_subject(db: Session, user: User, data: SubjectCreate) -> SubjectResponse:
    """Crée une matière dans le département du HOD. Un autre department_id est refusé."""
    department = _require_department(db, user)
    if data.department_id is not None and data.department_id != department.id:
        raise Forbidden("Cannot create a subject outside your department")

    subject = Subject(
        name=data.name,
        code=data.code,
        description=data.description,
        department_id=department.id,
    )
    db.add(subject)
    commit_or_conflict(db, CODE_TAKEN)
    db.refresh(subject)
    logger.info("Matière %s créée par le HOD %s (département %s)", subject.code, user.id, department.id)
    return SubjectResponse.model_validate(subject)


def update_subject(db: Session, user: User, subject_id: uuid.UUID, data: SubjectUpdate) -> SubjectResponse:
    """Modifie une matière du département du HOD. NotFound si elle appartient à un autre département."""
    department = _require_department(db, user)

    subject = db.execute(
        select(Subject).where(
            Subject.id == subject_id,
            Subject.department_id == department.id,
        )
    ).scalar()
    if subject is None:
        raise NotFound("Subject not found in your department")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("department_id") not in (None, department.id):
        raise Forbidden("Cannot move a subject to another department")
    update_data.pop("department_id", None)

    for field, value in update_data.items():
        setattr(subject, field, value)

    commit_or_conflict(db, CODE_TAKEN)
    db.refresh(subject)
    return SubjectResponse.model_validate(subject)


def list_department_teachers(db: Session, user: User) -> list[TeacherResponse]:
    department = _require_department(db, user)
    rows = db.execute(
        select(Teacher, User)
        .select_from(Teacher)
        .join(User, User.id == Teacher.user_id)
        .where(Teacher.department_id == department.id)
        .order_by(User.last_name, User.first_name)
    ).all()

    ref = DepartmentRef.model_validate(department)
    return [
        TeacherResponse(
            id=u.id,
            profile_id=t.id,
            email=u.email,
            first_name=u.first_name,
            last_name=u.last_name,
            phone=u.phone,
            profile_image=u.profile_image,
            employee_number=t.employee_number,
            qualification=t.qualification,
            hire_date=t.hire_date,
            department=ref,
        )
        for t, u in rows
    ]


def _require_department(db: Session, user: User) -> Department:
    """Sans département, le HOD n'a aucun périmètre : Forbidden."""
    department = get_own_department(db, user)
    if department is None:
        raise Forbidden("No department assigned to this account")
    return department
