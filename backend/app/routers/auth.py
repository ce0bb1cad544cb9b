"""
Router d'authentification : connexion, inscription (admin), compte courant.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app import roles
from app.database import get_db
from app.dependencies import require_roles, require_route_group
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from app.services import auth_service
from app.services.token_service import TokenCodec, get_token_codec

router = APIRouter(prefix="/api/auth", tags=["Authentification"])

account_user = require_route_group("account")


@router.post("/login", response_model=LoginResponse, summary="Se connecter")
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """Retourne un jeton valable 7 jours et l'utilisateur (sans hash de mot de passe)."""
    return auth_service.login(db, codec, data.email, data.password)


@router.post("/register", response_model=RegisterResponse, status_code=201,
             summary="Inscrire un utilisateur (admin)")
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_roles(roles.ADMIN)),
):
    """Crée l'utilisateur et son profil enseignant, élève ou parent selon le rôle."""
    return auth_service.register_user(db, data)


@router.get("/me", response_model=UserResponse, summary="Utilisateur connecté")
def me(current_user: User = Depends(account_user)):
    return current_user


@router.put("/profile", response_model=UserResponse, summary="Modifier son profil")
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(account_user),
):
    return auth_service.update_profile(db, current_user, data)


@router.put("/change-password", response_model=MessageResponse, summary="Changer son mot de passe")
def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(account_user),
):
    auth_service.change_password(db, current_user, data)
    return MessageResponse(message="Password changed successfully")
