"""
Router du chef de département (HOD) : périmètre limité à son département.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_route_group
from app.models.user import User
from app.schemas.academic import DepartmentResponse, SubjectCreate, SubjectResponse, SubjectUpdate
from app.schemas.user import TeacherResponse
from app.services import hod_service

router = APIRouter(
    prefix="/api/hod",
    tags=["Chef de département"],
    dependencies=[Depends(require_route_group("hod"))],
)


@router.get("/department", response_model=DepartmentResponse, summary="Mon département")
def get_my_department(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return hod_service.get_my_department(db, current_user)


@router.get("/department/subjects", response_model=List[SubjectResponse],
            summary="Matières de mon département")
def get_department_subjects(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return hod_service.list_department_subjects(db, current_user)


@router.post("/subjects", response_model=SubjectResponse, status_code=201,
             summary="Créer une matière dans mon département")
def create_subject(
    data: SubjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Un department_id différent du mien est refusé (403)."""
    return hod_service.create_subject(db, current_user, data)


@router.put("/subjects/{subject_id}", response_model=SubjectResponse,
            summary="Modifier une matière de mon département")
def update_subject(
    subject_id: uuid.UUID,
    data: SubjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return hod_service.update_subject(db, current_user, subject_id, data)


@router.get("/department/teachers", response_model=List[TeacherResponse],
            summary="Enseignants de mon département")
def get_department_teachers(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return hod_service.list_department_teachers(db, current_user)
