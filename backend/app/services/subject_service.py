"""
Service métier pour les matières (gestion par l'administrateur).
Les variantes limitées au département du HOD sont dans hod_service.
"""

import uuid
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import commit_or_conflict
from app.exceptions import NotFound
from app.models.academic import Department, Subject
from app.schemas.academic import SubjectCreate, SubjectResponse, SubjectUpdate

logger = logging.getLogger(__name__)

CODE_TAKEN = "Subject code already exists"


def get_subjects(db: Session) -> list[SubjectResponse]:
    subjects = db.execute(select(Subject).order_by(Subject.name)).scalars().all()
    return [SubjectResponse.model_validate(s) for s in subjects]


def create_subject(db: Session, data: SubjectCreate) -> SubjectResponse:
    if data.department_id is not None and db.get(Department, data.department_id) is None:
        raise NotFound("Department not found")

    subject = Subject(
        name=data.name,
        code=data.code,
        department_id=data.department_id,
        description=data.description,
    )
    db.add(subject)
    commit_or_conflict(db, CODE_TAKEN)
    db.refresh(subject)
    logger.info("Matière créée : %s", subject.code)
    return SubjectResponse.model_validate(subject)


def update_subject(db: Session, subject_id: uuid.UUID, data: SubjectUpdate) -> SubjectResponse:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise NotFound("Subject not found")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("department_id") is not None and db.get(Department, update_data["department_id"]) is None:
        raise NotFound("Department not found")

    for field, value in update_data.items():
        setattr(subject, field, value)

    commit_or_conflict(db, CODE_TAKEN)
    db.refresh(subject)
    return SubjectResponse.model_validate(subject)


def delete_subject(db: Session, subject_id: uuid.UUID) -> bool:
    subject = db.get(Subject, subject_id)
    if subject is None:
        return False
    db.delete(subject)
    db.commit()
    return True
