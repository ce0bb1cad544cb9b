"""
Service métier pour les niveaux académiques (Form 1, Form 2...).
L'association matière ↔ niveau est gérée par relationship_service.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import commit_or_conflict
from app.exceptions import NotFound
from app.models.academic import AcademicLevel
from app.schemas.academic import AcademicLevelCreate, AcademicLevelResponse, AcademicLevelUpdate

NAME_TAKEN = "Academic level with this name already exists"


def get_academic_levels(db: Session) -> list[AcademicLevelResponse]:
    levels = db.execute(
        select(AcademicLevel).order_by(AcademicLevel.display_order, AcademicLevel.name)
    ).scalars().all()
    return [AcademicLevelResponse.model_validate(level) for level in levels]


def create_academic_level(db: Session, data: AcademicLevelCreate) -> AcademicLevelResponse:
    level = AcademicLevel(name=data.name, description=data.description, display_order=data.display_order)
    db.add(level)
    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(level)
    return AcademicLevelResponse.model_validate(level)


def update_academic_level(db: Session, level_id: uuid.UUID, data: AcademicLevelUpdate) -> AcademicLevelResponse:
    level = db.get(AcademicLevel, level_id)
    if level is None:
        raise NotFound("Academic level not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(level, field, value)

    commit_or_conflict(db, NAME_TAKEN)
    db.refresh(level)
    return AcademicLevelResponse.model_validate(level)


def delete_academic_level(db: Session, level_id: uuid.UUID) -> bool:
    level = db.get(AcademicLevel, level_id)
    if level is None:
        return False
    db.delete(level)
    db.commit()
    return True
