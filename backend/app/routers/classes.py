"""
Router admin pour la gestion des classes scolaires.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_route_group
from app.exceptions import NotFound
from app.schemas.school_class import ClassCreate, ClassResponse, ClassUpdate
from app.services import class_service

router = APIRouter(
    prefix="/api/admin/classes",
    tags=["Admin — classes"],
    dependencies=[Depends(require_route_group("admin"))],
)


@router.post("", response_model=ClassResponse, status_code=201, summary="Créer une classe")
def create_class(data: ClassCreate, db: Session = Depends(get_db)):
    """Crée une nouvelle classe avec un nom unique, rattachée à un niveau académique."""
    return class_service.create_class(db, data)


@router.get("", response_model=List[ClassResponse], summary="Lister les classes")
def list_classes(db: Session = Depends(get_db)):
    """Retourne toutes les classes avec leur niveau et leur nombre d'élèves."""
    return class_service.get_classes(db)


@router.get("/{class_id}", response_model=ClassResponse, summary="Détail d'une classe")
def get_class(class_id: uuid.UUID, db: Session = Depends(get_db)):
    school_class = class_service.get_class(db, class_id)
    if school_class is None:
        raise NotFound("Class not found")
    return school_class


@router.put("/{class_id}", response_model=ClassResponse, summary="Modifier une classe")
def update_class(class_id: uuid.UUID, data: ClassUpdate, db: Session = Depends(get_db)):
    result = class_service.update_class(db, class_id, data)
    if result is None:
        raise NotFound("Class not found")
    return result


@router.delete("/{class_id}", status_code=204, summary="Supprimer une classe")
def delete_class(class_id: uuid.UUID, db: Session = Depends(get_db)):
    """Supprime une classe définitivement, avec ses assignations enseignant/matière."""
    if not class_service.delete_class(db, class_id):
        raise NotFound("Class not found")
