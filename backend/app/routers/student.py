"""
Router élève : matières du niveau de sa classe.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_route_group
from app.models.user import User
from app.schemas.relationship import StudentSubjectResponse
from app.services import relationship_service

router = APIRouter(
    prefix="/api/student",
    tags=["Élève"],
    dependencies=[Depends(require_route_group("student"))],
)


@router.get("/subjects", response_model=List[StudentSubjectResponse], summary="Mes matières")
def get_my_subjects(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return relationship_service.get_student_subjects(db, current_user.id)
