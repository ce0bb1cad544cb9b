"""
Scénarios de bout en bout sur une base SQLite en mémoire :
vrais modèles, vraie résolution de session, vraies contraintes d'unicité.
"""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from werkzeug.security import generate_password_hash

from app.database import Base, get_db
from app.main import app
from app.models.academic import AcademicLevel, Department, Subject
from app.models.profile import Teacher
from app.models.school_class import SchoolClass
from app.models.user import User

PASSWORD = "secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_client():
    """Client HTTP branché sur une base SQLite recréée pour chaque test."""
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


# --- Helpers ---

def seed(*objects):
    """Insère les objets et les retourne, attributs chargés."""
    with Session(engine, expire_on_commit=False) as session:
        session.add_all(objects)
        session.commit()
        for obj in objects:
            session.refresh(obj)
    return objects[0] if len(objects) == 1 else objects


def seed_user(role, email=None):
    return seed(User(
        email=email or f"{role}-{uuid.uuid4().hex[:6]}@school.org",
        password_hash=generate_password_hash(PASSWORD),
        role=role,
        first_name="Test",
        last_name=role.capitalize(),
        is_active=True,
    ))


def login(client, user):
    response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 200, response.json()
    return {"Authorization": f"Bearer {response.json()['token']}"}


# ============================================================
# Admin : assignation enseignant ↔ matière ↔ classe
# ============================================================

def test_cycle_assignation_enseignant(db_client):
    admin = seed_user("admin")
    teacher = seed_user("teacher")
    level = seed(AcademicLevel(name="Form 1"))
    subject = seed(Subject(name="Mathematics", code="MATH101"))
    school_class = seed(SchoolClass(name="Form 1A", level="Form 1", academic_level_id=level.id))
    admin_headers = login(db_client, admin)

    payload = {"teacher_id": str(teacher.id), "subject_id": str(subject.id), "class_id": str(school_class.id)}
    created = db_client.post("/api/admin/assign-teacher-subject", json=payload, headers=admin_headers)
    assert created.status_code == 201
    assignment_id = created.json()["id"]
    assert created.json()["teacher"]["email"] == teacher.email

    duplicate = db_client.post("/api/admin/assign-teacher-subject", json=payload, headers=admin_headers)
    assert duplicate.status_code == 409
    assert duplicate.json() == {
        "success": False,
        "error": "This teacher is already assigned to teach this subject in this class",
    }

    listed = db_client.get(f"/api/admin/classes/{school_class.id}/subjects", headers=admin_headers)
    assert [row["id"] for row in listed.json()] == [assignment_id]

    own = db_client.get("/api/teacher/classes", headers=login(db_client, teacher))
    assert own.status_code == 200
    assert own.json()[0]["subject"]["code"] == "MATH101"

    removed = db_client.delete(f"/api/admin/class-subjects/{assignment_id}", headers=admin_headers)
    assert removed.status_code == 204

    listed = db_client.get(f"/api/admin/classes/{school_class.id}/subjects", headers=admin_headers)
    assert listed.json() == []

    again = db_client.delete(f"/api/admin/class-subjects/{assignment_id}", headers=admin_headers)
    assert again.status_code == 404


def test_assignation_utilisateur_non_enseignant(db_client):
    admin = seed_user("admin")
    parent = seed_user("parent")
    subject = seed(Subject(name="Biology", code="BIO101"))
    school_class = seed(SchoolClass(name="Form 2B", level="Form 2"))

    response = db_client.post(
        "/api/admin/assign-teacher-subject",
        json={"teacher_id": str(parent.id), "subject_id": str(subject.id), "class_id": str(school_class.id)},
        headers=login(db_client, admin),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Teacher not found or user is not a teacher"


# ============================================================
# Session : désactivation et changement de rôle en cours de jeton
# ============================================================

def test_desactivation_refuse_le_jeton_deja_emis(db_client):
    admin = seed_user("admin")
    teacher = seed_user("teacher")
    admin_headers = login(db_client, admin)
    teacher_headers = login(db_client, teacher)

    assert db_client.get("/api/auth/me", headers=teacher_headers).status_code == 200

    deactivated = db_client.put(f"/api/admin/users/{teacher.id}/deactivate", headers=admin_headers)
    assert deactivated.status_code == 200
    assert deactivated.json()["is_active"] is False

    response = db_client.get("/api/auth/me", headers=teacher_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Account is not active. Please contact administrator."

    relogin = db_client.post("/api/auth/login", json={"email": teacher.email, "password": PASSWORD})
    assert relogin.status_code == 403

    db_client.put(f"/api/admin/users/{teacher.id}/activate", headers=admin_headers)
    assert db_client.get("/api/auth/me", headers=teacher_headers).status_code == 200


def test_changement_de_role_pris_en_compte_immediatement(db_client):
    admin = seed_user("admin")
    headmaster = seed_user("headmaster")
    headmaster_headers = login(db_client, headmaster)
    assert db_client.get("/api/headmaster/departments", headers=headmaster_headers).status_code == 200

    updated = db_client.put(
        f"/api/admin/users/{headmaster.id}", json={"role": "hod"}, headers=login(db_client, admin)
    )
    assert updated.status_code == 200

    response = db_client.get("/api/headmaster/departments", headers=headmaster_headers)
    assert response.status_code == 403
    assert response.json()["current"] == "hod"


def test_changement_de_role_refuse_avec_profil(db_client):
    admin = seed_user("admin")
    teacher = seed_user("teacher")
    seed(Teacher(user_id=teacher.id, employee_number="TCH0001"))

    response = db_client.put(
        f"/api/admin/users/{teacher.id}", json={"role": "student"}, headers=login(db_client, admin)
    )

    assert response.status_code == 409


def test_utilisateur_supprime_jeton_refuse(db_client):
    admin = seed_user("admin")
    teacher = seed_user("teacher")
    teacher_headers = login(db_client, teacher)

    assert db_client.delete(f"/api/admin/users/{teacher.id}", headers=login(db_client, admin)).status_code == 204

    response = db_client.get("/api/auth/me", headers=teacher_headers)
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


# ============================================================
# Chef de département : périmètre
# ============================================================

def test_hod_limite_a_son_departement(db_client):
    hod = seed_user("hod")
    own = seed(Department(name="Sciences", hod_id=hod.id))
    other = seed(Department(name="Humanities"))
    foreign_subject = seed(Subject(name="History", code="HIS101", department_id=other.id))
    headers = login(db_client, hod)

    refused = db_client.post(
        "/api/hod/subjects",
        json={"name": "Geography", "code": "GEO101", "department_id": str(other.id)},
        headers=headers,
    )
    assert refused.status_code == 403
    assert refused.json()["error"] == "Cannot create a subject outside your department"

    created = db_client.post("/api/hod/subjects", json={"name": "Physics", "code": "phy101"}, headers=headers)
    assert created.status_code == 201
    assert created.json()["department_id"] == str(own.id)
    assert created.json()["code"] == "PHY101"

    listed = db_client.get("/api/hod/department/subjects", headers=headers)
    assert [s["code"] for s in listed.json()] == ["PHY101"]

    hijack = db_client.put(f"/api/hod/subjects/{foreign_subject.id}", json={"name": "Hijack"}, headers=headers)
    assert hijack.status_code == 404

    department = db_client.get("/api/hod/department", headers=headers)
    assert department.json()["name"] == "Sciences"
    assert department.json()["nb_subjects"] == 1


def test_hod_sans_departement(db_client):
    hod = seed_user("hod")
    headers = login(db_client, hod)

    assert db_client.get("/api/hod/department", headers=headers).status_code == 404
    assert db_client.get("/api/hod/department/subjects", headers=headers).status_code == 403


# ============================================================
# Parent ↔ élèves, avec inscription des profils
# ============================================================

def register(client, headers, role, email):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": PASSWORD, "role": role, "first_name": "Test", "last_name": role},
        headers=headers,
    )
    assert response.status_code == 201, response.json()
    return response.json()


def test_liaison_parent_eleves(db_client):
    admin_headers = login(db_client, seed_user("admin"))
    parent = register(db_client, admin_headers, "parent", "mother@school.org")
    student = register(db_client, admin_headers, "student", "kid@school.org")
    parent_id, student_id = parent["parent_id"], student["student_id"]
    assert parent_id and student_id

    empty = db_client.post(
        "/api/admin/parents/link-students",
        json={"parent_id": parent_id, "student_ids": []},
        headers=admin_headers,
    )
    assert empty.status_code == 400

    link = {"parent_id": parent_id, "student_ids": [student_id]}
    assert db_client.post("/api/admin/parents/link-students", json=link, headers=admin_headers).status_code == 201
    duplicate = db_client.post("/api/admin/parents/link-students", json=link, headers=admin_headers)
    assert duplicate.status_code == 409

    parent_headers = {
        "Authorization": "Bearer " + db_client.post(
            "/api/auth/login", json={"email": "mother@school.org", "password": PASSWORD}
        ).json()["token"]
    }
    children = db_client.get("/api/parent/children", headers=parent_headers)
    assert [c["id"] for c in children.json()] == [student_id]

    unlink = {"parent_id": parent_id, "student_id": student_id}
    for _ in range(2):
        response = db_client.post("/api/admin/parents/unlink-student", json=unlink, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

    assert db_client.get("/api/parent/children", headers=parent_headers).json() == []


def test_inscription_email_deja_utilise(db_client):
    admin_headers = login(db_client, seed_user("admin"))
    register(db_client, admin_headers, "teacher", "dup@school.org")

    response = db_client.post(
        "/api/auth/register",
        json={"email": "DUP@school.org", "password": PASSWORD, "role": "teacher",
              "first_name": "A", "last_name": "B"},
        headers=admin_headers,
    )

    assert response.status_code == 409


def test_inscription_references_inexistantes_404(db_client):
    """Département ou classe inconnus : 404 et aucun utilisateur créé."""
    admin = seed_user("admin")
    admin_headers = login(db_client, admin)
    base = {"password": PASSWORD, "first_name": "A", "last_name": "B"}

    teacher = db_client.post(
        "/api/auth/register",
        json={**base, "email": "t@school.org", "role": "teacher", "department_id": str(uuid.uuid4())},
        headers=admin_headers,
    )
    student = db_client.post(
        "/api/auth/register",
        json={**base, "email": "s@school.org", "role": "student", "class_id": str(uuid.uuid4())},
        headers=admin_headers,
    )

    assert teacher.status_code == 404
    assert teacher.json()["error"] == "Department not found"
    assert student.status_code == 404
    assert student.json()["error"] == "Class not found"
    users = db_client.get("/api/admin/users", headers=admin_headers).json()
    assert [u["email"] for u in users] == [admin.email]


def test_modification_admin_null_400(db_client):
    admin = seed_user("admin")
    teacher = seed_user("teacher")

    response = db_client.put(
        f"/api/admin/users/{teacher.id}", json={"last_name": None}, headers=login(db_client, admin)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "last_name: Field cannot be null"


def test_profil_prenom_null_400(db_client):
    student = seed_user("student")
    headers = login(db_client, student)

    response = db_client.put("/api/auth/profile", json={"first_name": None}, headers=headers)
    assert response.status_code == 400

    me = db_client.put("/api/auth/profile", json={"first_name": "Khady"}, headers=headers)
    assert me.status_code == 200
    assert me.json()["first_name"] == "Khady"


def test_admin_ne_se_desactive_pas_par_modification(db_client):
    admin = seed_user("admin")
    headers = login(db_client, admin)

    response = db_client.put(f"/api/admin/users/{admin.id}", json={"is_active": False}, headers=headers)

    assert response.status_code == 400
    assert db_client.get("/api/auth/me", headers=headers).status_code == 200


def test_changement_vers_role_a_profil_refuse(db_client):
    admin = seed_user("admin")
    headmaster = seed_user("headmaster")

    response = db_client.put(
        f"/api/admin/users/{headmaster.id}", json={"role": "parent"}, headers=login(db_client, admin)
    )

    assert response.status_code == 409
    with Session(engine) as session:
        assert session.get(User, headmaster.id).role == "headmaster"
