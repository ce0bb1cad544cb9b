"""
Router du directeur : consultation des départements et des classes.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_route_group
from app.schemas.academic import DepartmentResponse
from app.schemas.school_class import ClassResponse
from app.services import class_service, department_service

router = APIRouter(
    prefix="/api/headmaster",
    tags=["Direction"],
    dependencies=[Depends(require_route_group("headmaster"))],
)


@router.get("/departments", response_model=List[DepartmentResponse], summary="Départements")
def list_departments(db: Session = Depends(get_db)):
    return department_service.get_departments(db)


@router.get("/classes", response_model=List[ClassResponse], summary="Classes")
def list_classes(db: Session = Depends(get_db)):
    return class_service.get_classes(db)
