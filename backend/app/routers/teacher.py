"""
Router enseignant : classes et matières assignées (lecture seule, assignées par l'admin).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_route_group
from app.models.user import User
from app.schemas.relationship import ClassSubjectResponse
from app.services import relationship_service

router = APIRouter(
    prefix="/api/teacher",
    tags=["Enseignant"],
    dependencies=[Depends(require_route_group("teacher"))],
)


@router.get("/classes", response_model=List[ClassSubjectResponse], summary="Mes classes et matières")
def get_my_classes(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return relationship_service.get_teacher_assignments(db, current_user.id)
