"""
Router admin pour la structure académique : départements, matières, niveaux.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_route_group
from app.exceptions import NotFound
from app.schemas.academic import (
    AcademicLevelCreate,
    AcademicLevelResponse,
    AcademicLevelUpdate,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    SubjectCreate,
    SubjectResponse,
    SubjectUpdate,
)
from app.services import academic_level_service, department_service, subject_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin — structure académique"],
    dependencies=[Depends(require_route_group("admin"))],
)


# --- Départements ---

@router.get("/departments", response_model=List[DepartmentResponse], summary="Lister les départements")
def list_departments(db: Session = Depends(get_db)):
    return department_service.get_departments(db)


@router.post("/departments", response_model=DepartmentResponse, status_code=201,
             summary="Créer un département")
def create_department(data: DepartmentCreate, db: Session = Depends(get_db)):
    return department_service.create_department(db, data)


@router.put("/departments/{department_id}", response_model=DepartmentResponse,
            summary="Modifier un département")
def update_department(department_id: uuid.UUID, data: DepartmentUpdate, db: Session = Depends(get_db)):
    return department_service.update_department(db, department_id, data)


@router.delete("/departments/{department_id}", status_code=204, summary="Supprimer un département")
def delete_department(department_id: uuid.UUID, db: Session = Depends(get_db)):
    if not department_service.delete_department(db, department_id):
        raise NotFound("Department not found")


# --- Matières ---

@router.get("/subjects", response_model=List[SubjectResponse], summary="Lister les matières")
def list_subjects(db: Session = Depends(get_db)):
    return subject_service.get_subjects(db)


@router.post("/subjects", response_model=SubjectResponse, status_code=201, summary="Créer une matière")
def create_subject(data: SubjectCreate, db: Session = Depends(get_db)):
    return subject_service.create_subject(db, data)


@router.put("/subjects/{subject_id}", response_model=SubjectResponse, summary="Modifier une matière")
def update_subject(subject_id: uuid.UUID, data: SubjectUpdate, db: Session = Depends(get_db)):
    return subject_service.update_subject(db, subject_id, data)


@router.delete("/subjects/{subject_id}", status_code=204, summary="Supprimer une matière")
def delete_subject(subject_id: uuid.UUID, db: Session = Depends(get_db)):
    if not subject_service.delete_subject(db, subject_id):
        raise NotFound("Subject not found")


# --- Niveaux académiques ---

@router.get("/academic-levels", response_model=List[AcademicLevelResponse],
            summary="Lister les niveaux académiques")
def list_academic_levels(db: Session = Depends(get_db)):
    """Niveaux triés par ordre d'affichage (Form 1, Form 2...)."""
    return academic_level_service.get_academic_levels(db)


@router.post("/academic-levels", response_model=AcademicLevelResponse, status_code=201,
             summary="Créer un niveau académique")
def create_academic_level(data: AcademicLevelCreate, db: Session = Depends(get_db)):
    return academic_level_service.create_academic_level(db, data)


@router.put("/academic-levels/{level_id}", response_model=AcademicLevelResponse,
            summary="Modifier un niveau académique")
def update_academic_level(level_id: uuid.UUID, data: AcademicLevelUpdate, db: Session = Depends(get_db)):
    return academic_level_service.update_academic_level(db, level_id, data)


@router.delete("/academic-levels/{level_id}", status_code=204, summary="Supprimer un niveau académique")
def delete_academic_level(level_id: uuid.UUID, db: Session = Depends(get_db)):
    if not academic_level_service.delete_academic_level(db, level_id):
        raise NotFound("Academic level not found")
