"""
Router admin pour les utilisateurs, enseignants et élèves.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_route_group
from app.exceptions import NotFound
from app.models.user import User
from app.schemas.auth import RegisterRequest, RegisterResponse, UserResponse
from app.schemas.user import StudentResponse, TeacherResponse, UserUpdate
from app.services import auth_service, user_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin — utilisateurs"],
    dependencies=[Depends(require_route_group("admin"))],
)


@router.get("/users", response_model=List[UserResponse], summary="Lister les utilisateurs")
def list_users(role: Optional[str] = None, db: Session = Depends(get_db)):
    """Retourne les utilisateurs du plus récent au plus ancien, filtrables par rôle."""
    return user_service.get_users(db, role)


@router.get("/users/{user_id}", response_model=UserResponse, summary="Détail d'un utilisateur")
def get_user(user_id: uuid.UUID, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.post("/users", response_model=RegisterResponse, status_code=201, summary="Créer un utilisateur")
def create_user(data: RegisterRequest, db: Session = Depends(get_db)):
    """Même parcours que l'inscription : le profil de rôle est créé avec l'utilisateur."""
    return auth_service.register_user(db, data)


@router.put("/users/{user_id}", response_model=UserResponse, summary="Modifier un utilisateur")
def update_user(
    user_id: uuid.UUID,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Un admin ne peut pas désactiver son propre compte par cette route non plus."""
    return user_service.update_user(db, user_id, data, current_user.id)


@router.delete("/users/{user_id}", status_code=204, summary="Supprimer un utilisateur")
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not user_service.delete_user(db, user_id, current_user.id):
        raise NotFound("User not found")


@router.put("/users/{user_id}/activate", response_model=UserResponse, summary="Activer un compte")
def activate_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.set_user_active(db, user_id, True, current_user.id)


@router.put("/users/{user_id}/deactivate", response_model=UserResponse, summary="Désactiver un compte")
def deactivate_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Les jetons déjà émis pour ce compte sont refusés dès la requête suivante."""
    return user_service.set_user_active(db, user_id, False, current_user.id)


@router.get("/teachers", response_model=List[TeacherResponse], summary="Lister les enseignants")
def list_teachers(db: Session = Depends(get_db)):
    return user_service.get_teachers(db)


@router.get("/teachers/{user_id}", response_model=TeacherResponse, summary="Détail d'un enseignant")
def get_teacher(user_id: uuid.UUID, db: Session = Depends(get_db)):
    return user_service.get_teacher(db, user_id)


@router.get("/students", response_model=List[StudentResponse], summary="Lister les élèves")
def list_students(db: Session = Depends(get_db)):
    return user_service.get_students(db)
