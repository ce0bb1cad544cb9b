"""
Service métier des associations : enseignant ↔ matière ↔ classe,
parent ↔ élèves, matière ↔ niveau académique.

Même schéma pour chaque insertion :
1. Vérifier l'existence des deux (ou trois) extrémités
2. Vérifier l'absence de doublon sur la clé naturelle
3. Insérer (la contrainte d'unicité BDD reste l'autorité → Conflict)
4. Retourner la ligne enrichie des champs d'affichage
"""

import uuid
import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app import roles
from app.database import commit_or_conflict
from app.exceptions import Conflict, NotFound, ValidationError
from app.models.academic import AcademicLevel, Department, Subject, SubjectAcademicLevel
from app.models.profile import Parent, Student
from app.models.school_class import ClassSubject, SchoolClass, StudentParent
from app.models.user import User
from app.schemas.relationship import (
    ChildResponse,
    ClassSubjectAssign,
    ClassSubjectResponse,
    ClassSummary,
    ParentStudentsLink,
    StudentParentResponse,
    StudentSubjectResponse,
    SubjectLevelAssign,
    SubjectLevelResponse,
    SubjectSummary,
    TeacherSummary,
)

logger = logging.getLogger(__name__)

TEACHER_ALREADY_ASSIGNED = "This teacher is already assigned to teach this subject in this class"
STUDENTS_ALREADY_LINKED = "One or more students are already linked to this parent"
SUBJECT_ALREADY_IN_LEVEL = "Subject already assigned to this academic level"


# ============================================================
# Enseignant ↔ matière ↔ classe
# ============================================================

def assign_teacher_to_subject_class(db: Session, data: ClassSubjectAssign) -> ClassSubjectResponse:
    """
    Assigne un enseignant à une matière dans une classe.

    Validations :
    1. teacher_id désigne un utilisateur actif de rôle teacher
    2. La matière et la classe existent
    3. Le triplet (classe, matière, enseignant) n'existe pas déjà
    """
    teacher = db.execute(
        select(User).where(User.id == data.teacher_id, User.role == roles.TEACHER)
    ).scalar()
    if teacher is None or not teacher.is_active:
        raise NotFound("Teacher not found or user is not a teacher")

    subject = db.get(Subject, data.subject_id)
    if subject is None:
        raise NotFound("Subject not found")

    school_class = db.get(SchoolClass, data.class_id)
    if school_class is None:
        raise NotFound("Class not found")

    existing = db.execute(
        select(ClassSubject.id).where(
            ClassSubject.class_id == data.class_id,
            ClassSubject.subject_id == data.subject_id,
            ClassSubject.teacher_id == data.teacher_id,
        )
    ).scalar()
    if existing is not None:
        raise Conflict(TEACHER_ALREADY_ASSIGNED)

    link = ClassSubject(
        class_id=data.class_id,
        subject_id=data.subject_id,
        teacher_id=data.teacher_id,
    )
    db.add(link)
    commit_or_conflict(db, TEACHER_ALREADY_ASSIGNED)
    db.refresh(link)

    logger.info(
        "Enseignant %s assigné à la matière %s (classe %s)",
        data.teacher_id, subject.code, school_class.name,
    )
    return _class_subject_response(link, teacher, subject, school_class)


def get_class_subjects(db: Session, class_id: uuid.UUID) -> list[ClassSubjectResponse]:
    """Retourne les matières d'une classe avec leur enseignant. NotFound si la classe n'existe pas."""
    if db.get(SchoolClass, class_id) is None:
        raise NotFound("Class not found")

    rows = db.execute(
        _class_subject_query()
        .where(ClassSubject.class_id == class_id)
        .order_by(Subject.name)
    ).all()
    return [_class_subject_response(*row) for row in rows]


def get_teacher_assignments(db: Session, teacher_id: uuid.UUID) -> list[ClassSubjectResponse]:
    """Classes et matières assignées à un enseignant (lecture seule pour lui)."""
    rows = db.execute(
        _class_subject_query()
        .where(ClassSubject.teacher_id == teacher_id)
        .order_by(SchoolClass.name, Subject.name)
    ).all()
    return [_class_subject_response(*row) for row in rows]


def remove_teacher_assignment(db: Session, assignment_id: uuid.UUID) -> bool:
    """Supprime une assignation. Retourne True si supprimée, False si inexistante."""
    link = db.get(ClassSubject, assignment_id)
    if link is None:
        return False
    db.delete(link)
    db.commit()
    logger.info("Assignation enseignant %s supprimée", assignment_id)
    return True


# ============================================================
# Parent ↔ élèves
# ============================================================

def link_parent_to_students(db: Session, data: ParentStudentsLink) -> list[StudentParentResponse]:
    """
    Lie un parent à un ou plusieurs élèves, en une seule transaction.

    Tout ou rien : si un seul couple (parent, élève) existe déjà, rien n'est inséré.
    Les IDs répétés dans la requête sont fusionnés.
    """
    student_ids = list(dict.fromkeys(data.student_ids))
    if not student_ids:
        raise ValidationError("parent_id and student_ids array are required")

    if db.get(Parent, data.parent_id) is None:
        raise NotFound("Parent not found")

    found = set(db.execute(
        select(Student.id).where(Student.id.in_(student_ids))
    ).scalars().all())
    missing = [sid for sid in student_ids if sid not in found]
    if missing:
        raise NotFound("Student not found: " + ", ".join(str(sid) for sid in missing))

    already_linked = db.execute(
        select(StudentParent.student_id).where(
            StudentParent.parent_id == data.parent_id,
            StudentParent.student_id.in_(student_ids),
        )
    ).scalars().all()
    if already_linked:
        raise Conflict(STUDENTS_ALREADY_LINKED)

    links = [StudentParent(parent_id=data.parent_id, student_id=sid) for sid in student_ids]
    db.add_all(links)
    commit_or_conflict(db, STUDENTS_ALREADY_LINKED)
    for link in links:
        db.refresh(link)

    logger.info("Parent %s lié à %d élève(s)", data.parent_id, len(links))
    return [StudentParentResponse.model_validate(link) for link in links]


def unlink_parent_from_student(db: Session, parent_id: uuid.UUID, student_id: uuid.UUID) -> None:
    """
    Supprime le lien parent ↔ élève.
    Idempotent : aucun lien existant n'est pas une erreur (contrairement à l'insertion).
    """
    result = db.execute(
        delete(StudentParent).where(
            StudentParent.parent_id == parent_id,
            StudentParent.student_id == student_id,
        )
    )
    db.commit()
    logger.info(
        "Lien parent %s ↔ élève %s supprimé (%s ligne(s))",
        parent_id, student_id, result.rowcount,
    )


def get_parent_children(db: Session, parent_user_id: uuid.UUID) -> list[ChildResponse]:
    """Élèves liés au profil parent de l'utilisateur connecté."""
    parent = db.execute(
        select(Parent).where(Parent.user_id == parent_user_id)
    ).scalar()
    if parent is None:
        raise NotFound("Parent profile not found")

    rows = db.execute(
        select(Student, User, SchoolClass)
        .select_from(StudentParent)
        .join(Student, Student.id == StudentParent.student_id)
        .join(User, User.id == Student.user_id)
        .outerjoin(SchoolClass, SchoolClass.id == Student.class_id)
        .where(StudentParent.parent_id == parent.id)
        .order_by(User.last_name, User.first_name)
    ).all()

    return [
        ChildResponse(
            id=student.id,
            student_number=student.student_number,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            class_id=school_class.id if school_class else None,
            class_name=school_class.name if school_class else None,
        )
        for student, user, school_class in rows
    ]


# ============================================================
# Matière ↔ niveau académique
# ============================================================

def assign_subject_to_academic_level(db: Session, data: SubjectLevelAssign) -> SubjectLevelResponse:
    """Ajoute une matière au programme d'un niveau (obligatoire par défaut)."""
    if db.get(AcademicLevel, data.academic_level_id) is None:
        raise NotFound("Academic level not found")

    subject = db.get(Subject, data.subject_id)
    if subject is None:
        raise NotFound("Subject not found")

    existing = db.execute(
        select(SubjectAcademicLevel.id).where(
            SubjectAcademicLevel.academic_level_id == data.academic_level_id,
            SubjectAcademicLevel.subject_id == data.subject_id,
        )
    ).scalar()
    if existing is not None:
        raise Conflict(SUBJECT_ALREADY_IN_LEVEL)

    link = SubjectAcademicLevel(
        academic_level_id=data.academic_level_id,
        subject_id=data.subject_id,
        is_required=data.is_required,
    )
    db.add(link)
    commit_or_conflict(db, SUBJECT_ALREADY_IN_LEVEL)
    db.refresh(link)

    logger.info("Matière %s ajoutée au niveau %s", subject.code, data.academic_level_id)
    return _subject_level_response(link, subject)


def get_academic_level_subjects(db: Session, level_id: uuid.UUID) -> list[SubjectLevelResponse]:
    if db.get(AcademicLevel, level_id) is None:
        raise NotFound("Academic level not found")

    rows = db.execute(
        select(SubjectAcademicLevel, Subject)
        .select_from(SubjectAcademicLevel)
        .join(Subject, Subject.id == SubjectAcademicLevel.subject_id)
        .where(SubjectAcademicLevel.academic_level_id == level_id)
        .order_by(Subject.name)
    ).all()
    return [_subject_level_response(link, subject) for link, subject in rows]


def remove_subject_from_academic_level(db: Session, link_id: uuid.UUID) -> bool:
    """Retire une matière d'un niveau. Retourne False si l'association n'existe pas."""
    link = db.get(SubjectAcademicLevel, link_id)
    if link is None:
        return False
    db.delete(link)
    db.commit()
    return True


def get_student_subjects(db: Session, student_user_id: uuid.UUID) -> list[StudentSubjectResponse]:
    """
    Matières du niveau de la classe de l'élève connecté,
    avec le nom de l'enseignant assigné à cette matière dans sa classe.
    """
    student = db.execute(
        select(Student).where(Student.user_id == student_user_id)
    ).scalar()
    if student is None:
        raise NotFound("Student profile not found")

    if student.class_id is None:
        return []
    school_class = db.get(SchoolClass, student.class_id)
    if school_class is None or school_class.academic_level_id is None:
        return []

    rows = db.execute(
        select(Subject, SubjectAcademicLevel.is_required, Department.name)
        .select_from(SubjectAcademicLevel)
        .join(Subject, Subject.id == SubjectAcademicLevel.subject_id)
        .outerjoin(Department, Department.id == Subject.department_id)
        .where(SubjectAcademicLevel.academic_level_id == school_class.academic_level_id)
        .order_by(Subject.name)
    ).all()

    teachers = {}
    for subject_id, first_name, last_name in db.execute(
        select(ClassSubject.subject_id, User.first_name, User.last_name)
        .join(User, User.id == ClassSubject.teacher_id)
        .where(ClassSubject.class_id == school_class.id)
    ).all():
        teachers.setdefault(subject_id, f"{first_name} {last_name}")

    return [
        StudentSubjectResponse(
            subject_id=subject.id,
            subject_name=subject.name,
            subject_code=subject.code,
            department_name=department_name,
            is_required=is_required,
            teacher_name=teachers.get(subject.id),
            class_name=school_class.name,
        )
        for subject, is_required, department_name in rows
    ]


# --- Helpers ---

def _class_subject_query():
    return (
        select(ClassSubject, User, Subject, SchoolClass)
        .select_from(ClassSubject)
        .join(User, User.id == ClassSubject.teacher_id)
        .join(Subject, Subject.id == ClassSubject.subject_id)
        .join(SchoolClass, SchoolClass.id == ClassSubject.class_id)
    )


def _class_subject_response(link, teacher, subject, school_class) -> ClassSubjectResponse:
    return ClassSubjectResponse(
        id=link.id,
        teacher=TeacherSummary.model_validate(teacher),
        subject=SubjectSummary.model_validate(subject),
        school_class=ClassSummary.model_validate(school_class),
    )


def _subject_level_response(link, subject) -> SubjectLevelResponse:
    return SubjectLevelResponse(
        id=link.id,
        academic_level_id=link.academic_level_id,
        is_required=link.is_required,
        subject=SubjectSummary.model_validate(subject),
    )
