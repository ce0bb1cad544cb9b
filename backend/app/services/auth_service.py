"""
Service métier d'authentification : connexion, inscription (avec profil de rôle),
mise à jour du profil et changement de mot de passe.
"""

import time
import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from app import roles
from app.config import settings
from app.database import commit_or_conflict
from app.exceptions import AccountDisabled, Conflict, LoginFailed, NotFound, ValidationError
from app.models.academic import Department
from app.models.profile import Parent, Student, Teacher
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.auth import (
    LoginResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from app.services.token_service import TokenCodec

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"


def login(db: Session, codec: TokenCodec, email: str, password: str) -> LoginResponse:
    """
    Vérifie les identifiants et émet un jeton.
    Même message d'erreur pour un email inconnu et un mauvais mot de passe.
    """
    user = db.execute(
        select(User).where(User.email == email.strip().lower())
    ).scalar()

    if user is None or not check_password_hash(user.password_hash, password):
        raise LoginFailed()

    if not user.is_active:
        raise AccountDisabled("Your account is not active. Please contact the administrator.")

    user.last_login = datetime.now()
    db.commit()
    db.refresh(user)

    logger.info("Connexion de %s (%s)", user.id, user.role)
    return LoginResponse(token=codec.issue(user), user=UserResponse.model_validate(user))


def register_user(db: Session, data: RegisterRequest) -> RegisterResponse:
    """
    Crée un utilisateur et, selon son rôle, son profil enseignant, élève ou parent.

    L'utilisateur et son profil sont créés dans la même transaction :
    un profil de rôle R n'existe jamais sans utilisateur de rôle R.
    """
    email = data.email.lower()
    existing = db.execute(select(User.id).where(User.email == email)).scalar()
    if existing is not None:
        raise Conflict(EMAIL_TAKEN)

    if len(data.password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    _check_profile_references(db, data)

    user = User(
        email=email,
        password_hash=generate_password_hash(data.password),
        role=data.role,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        is_active=True,
    )
    db.add(user)
    db.flush()  # Obtenir l'ID avant de créer le profil

    profile = _build_profile(user, data)
    if profile is not None:
        db.add(profile)

    commit_or_conflict(db, EMAIL_TAKEN)
    db.refresh(user)
    if profile is not None:
        db.refresh(profile)

    logger.info("Utilisateur inscrit : %s (%s)", user.id, user.role)
    return RegisterResponse(
        user=UserResponse.model_validate(user),
        teacher_id=profile.id if isinstance(profile, Teacher) else None,
        student_id=profile.id if isinstance(profile, Student) else None,
        parent_id=profile.id if isinstance(profile, Parent) else None,
    )


def update_profile(db: Session, user: User, data: ProfileUpdate) -> UserResponse:
    """Met à jour les champs fournis. Rôle, email et activation restent réservés à l'admin."""
    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


def change_password(db: Session, user: User, data: PasswordChange) -> None:
    if not data.current_password or not data.new_password:
        raise ValidationError("Current password and new password are required")

    if len(data.new_password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"New password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    if not check_password_hash(user.password_hash, data.current_password):
        raise LoginFailed("Current password is incorrect")

    user.password_hash = generate_password_hash(data.new_password)
    db.commit()
    logger.info("Mot de passe modifié pour %s", user.id)


def _check_profile_references(db: Session, data: RegisterRequest) -> None:
    """Le département (enseignant) et la classe (élève) doivent exister avant l'insertion."""
    if data.role == roles.TEACHER and data.department_id is not None:
        if db.get(Department, data.department_id) is None:
            raise NotFound("Department not found")
    if data.role == roles.STUDENT and data.class_id is not None:
        if db.get(SchoolClass, data.class_id) is None:
            raise NotFound("Class not found")


def _build_profile(user: User, data: RegisterRequest):
    """Construit le profil de rôle, ou None pour admin, headmaster et hod."""
    # Numéros générés à partir de l'horodatage en millisecondes (ex: TCH1718000000000)
    stamp = int(time.time() * 1000)

    if data.role == roles.TEACHER:
        return Teacher(
            user_id=user.id,
            employee_number=f"TCH{stamp}",
            department_id=data.department_id,
            qualification=data.qualification,
            hire_date=date.today(),
        )
    if data.role == roles.STUDENT:
        return Student(
            user_id=user.id,
            student_number=f"STU{stamp}",
            class_id=data.class_id,
            date_of_birth=data.date_of_birth,
            gender=data.gender,
            address=data.address,
            enrollment_date=date.today(),
        )
    if data.role == roles.PARENT:
        return Parent(
            user_id=user.id,
            relationship=data.relationship,
            occupation=data.occupation,
        )
    return None
