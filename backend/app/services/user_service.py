"""
Service métier de gestion des utilisateurs par l'administrateur :
consultation, modification, activation/désactivation, suppression,
listes des enseignants et des élèves.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app import roles
from app.database import commit_or_conflict
from app.exceptions import Conflict, NotFound, ValidationError
from app.models.academic import Department
from app.models.profile import Parent, Student, Teacher
from app.models.school_class import SchoolClass
from app.models.user import User
from app.schemas.auth import UserResponse
from app.schemas.user import DepartmentRef, StudentResponse, TeacherResponse, UserUpdate

logger = logging.getLogger(__name__)

PROFILE_MODELS = {
    roles.TEACHER: Teacher,
    roles.STUDENT: Student,
    roles.PARENT: Parent,
}


def get_users(db: Session, role: Optional[str] = None) -> list[UserResponse]:
    """Retourne les utilisateurs, du plus récent au plus ancien, filtrés par rôle si fourni."""
    query = select(User).order_by(User.created_at.desc())
    if role:
        query = query.where(User.role == role)
    users = db.execute(query).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


def get_user(db: Session, user_id: uuid.UUID) -> UserResponse:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return UserResponse.model_validate(user)


def update_user(
    db: Session, user_id: uuid.UUID, data: UserUpdate, acting_user_id: uuid.UUID
) -> UserResponse:
    """
    Met à jour les champs fournis d'un utilisateur.

    Un changement de rôle est refusé s'il casserait la correspondance rôle ↔ profil :
    - l'utilisateur possède un profil (enseignant, élève, parent) de son rôle actuel
    - le nouveau rôle exige un profil, qui n'est créé qu'à l'inscription
    """
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("is_active") is False and user_id == acting_user_id:
        raise ValidationError("Cannot deactivate your own account")

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    if "email" in update_data:
        update_data["email"] = update_data["email"].lower()

    new_role = update_data.get("role")
    if new_role and new_role != user.role:
        if _has_role_profile(db, user):
            raise Conflict(f"Cannot change role of a user with a {user.role} profile")
        if new_role in roles.PROFILE_ROLES:
            raise Conflict(f"Cannot change role to {new_role}: register a new {new_role} account instead")

    for field, value in update_data.items():
        setattr(user, field, value)

    commit_or_conflict(db, "User with this email already exists")
    db.refresh(user)
    logger.info("Utilisateur %s modifié : %s", user.id, sorted(update_data))
    return UserResponse.model_validate(user)


def set_user_active(
    db: Session, user_id: uuid.UUID, is_active: bool, acting_user_id: uuid.UUID
) -> UserResponse:
    """
    Active ou désactive un compte. Effet immédiat : la session relit is_active
    à chaque requête, les jetons déjà émis sont refusés dès la désactivation.
    """
    if not is_active and user_id == acting_user_id:
        raise ValidationError("Cannot deactivate your own account")

    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    user.is_active = is_active
    db.commit()
    db.refresh(user)
    logger.info("Utilisateur %s %s", user.id, "activé" if is_active else "désactivé")
    return UserResponse.model_validate(user)


def delete_user(db: Session, user_id: uuid.UUID, acting_user_id: uuid.UUID) -> bool:
    """Supprime un utilisateur. Retourne False s'il n'existe pas."""
    if user_id == acting_user_id:
        raise ValidationError("Cannot delete your own account")

    user = db.get(User, user_id)
    if user is None:
        return False
    db.delete(user)
    db.commit()
    logger.info("Utilisateur %s supprimé", user_id)
    return True


def get_teachers(db: Session) -> list[TeacherResponse]:
    rows = db.execute(
        select(Teacher, User, Department)
        .select_from(Teacher)
        .join(User, User.id == Teacher.user_id)
        .outerjoin(Department, Department.id == Teacher.department_id)
        .order_by(Teacher.created_at.desc())
    ).all()
    return [_teacher_response(t, u, d) for t, u, d in rows]


def get_teacher(db: Session, user_id: uuid.UUID) -> TeacherResponse:
    """Enseignant par ID utilisateur."""
    row = db.execute(
        select(Teacher, User, Department)
        .select_from(Teacher)
        .join(User, User.id == Teacher.user_id)
        .outerjoin(Department, Department.id == Teacher.department_id)
        .where(Teacher.user_id == user_id)
    ).first()
    if row is None:
        raise NotFound("Teacher not found")
    return _teacher_response(*row)


def get_students(db: Session) -> list[StudentResponse]:
    rows = db.execute(
        select(Student, User, SchoolClass)
        .select_from(Student)
        .join(User, User.id == Student.user_id)
        .outerjoin(SchoolClass, SchoolClass.id == Student.class_id)
        .order_by(Student.enrollment_date.desc())
    ).all()

    return [
        StudentResponse(
            id=student.id,
            user_id=user.id,
            student_number=student.student_number,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            date_of_birth=student.date_of_birth,
            gender=student.gender,
            enrollment_date=student.enrollment_date,
            class_id=school_class.id if school_class else None,
            class_name=school_class.name if school_class else None,
            created_at=user.created_at,
        )
        for student, user, school_class in rows
    ]


def _has_role_profile(db: Session, user: User) -> bool:
    model = PROFILE_MODELS.get(user.role)
    if model is None:
        return False
    return db.execute(
        select(model.id).where(model.user_id == user.id)
    ).scalar() is not None


def _teacher_response(teacher, user, department) -> TeacherResponse:
    return TeacherResponse(
        id=user.id,
        profile_id=teacher.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        profile_image=user.profile_image,
        employee_number=teacher.employee_number,
        qualification=teacher.qualification,
        hire_date=teacher.hire_date,
        department=DepartmentRef.model_validate(department) if department else None,
    )
