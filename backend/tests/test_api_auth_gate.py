"""
Tests d'intégration API de la chaîne d'authentification :
en-tête → jeton → utilisateur → rôle, et format des erreurs.
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app import roles
from app.main import app
from app.services.token_service import TokenCodec, get_token_codec

from conftest import make_user

# Une route représentative par groupe, et le service à neutraliser quand l'accès est accordé
GROUP_ROUTES = {
    roles.ADMIN: ("/api/admin/users", "app.routers.users.user_service.get_users"),
    roles.HEADMASTER: ("/api/headmaster/departments", "app.routers.headmaster.department_service.get_departments"),
    roles.HOD: ("/api/hod/department/subjects", "app.routers.hod.hod_service.list_department_subjects"),
    roles.TEACHER: ("/api/teacher/classes", "app.routers.teacher.relationship_service.get_teacher_assignments"),
    roles.PARENT: ("/api/parent/children", "app.routers.parent.relationship_service.get_parent_children"),
    roles.STUDENT: ("/api/student/subjects", "app.routers.student.relationship_service.get_student_subjects"),
}


# ============================================================
# Authentification (401 / 403)
# ============================================================

def test_sans_jeton_401(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Access token required"}


def test_schema_basic_refuse_401(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Basic YWRtaW46YWRtaW4="})
    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


def test_jeton_mal_forme_403(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Invalid or expired token"}


def test_jeton_expire_403(client, mock_db):
    user = make_user("teacher")
    mock_db.get.return_value = user
    token = get_token_codec().issue(user, now=datetime.now(timezone.utc) - timedelta(days=8))

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json()["error"] == "Invalid or expired token"


def test_jeton_autre_secret_403(client, mock_db):
    user = make_user("admin")
    mock_db.get.return_value = user
    token = TokenCodec(secret="not-the-server-secret").issue(user)

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


def test_utilisateur_inexistant_401(client, mock_db, login_as):
    headers = login_as(roles.TEACHER)
    mock_db.get.return_value = None

    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid token"}


def test_compte_desactive_403(client, login_as):
    headers = login_as(roles.TEACHER, is_active=False)

    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == 403
    assert response.json()["error"] == "Account is not active. Please contact administrator."


def test_me_retourne_l_utilisateur_sans_hash(client, login_as):
    headers = login_as(roles.PARENT, email="parent@school.org")

    response = client.get("/api/auth/me", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "parent@school.org"
    assert body["role"] == "parent"
    assert "password_hash" not in body


# ============================================================
# Contrôle de rôle par groupe de routes
# ============================================================

@pytest.mark.parametrize("role", sorted(roles.ALL_ROLES))
@pytest.mark.parametrize("owner", sorted(GROUP_ROUTES))
def test_groupe_de_routes_par_role(client, login_as, owner, role):
    url, service = GROUP_ROUTES[owner]
    headers = login_as(role)

    with patch(service) as mock:
        mock.return_value = []
        response = client.get(url, headers=headers)

    if role == owner:
        assert response.status_code == 200
        mock.assert_called_once()
    else:
        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": "Access denied. Insufficient permissions.",
            "required": [owner],
            "current": role,
        }
        mock.assert_not_called()


@pytest.mark.parametrize("role", sorted(roles.ALL_ROLES))
def test_compte_ouvert_a_tous_les_roles(client, login_as, role):
    response = client.get("/api/auth/me", headers=login_as(role))
    assert response.status_code == 200
    assert response.json()["role"] == role


@pytest.mark.parametrize("role", [roles.HEADMASTER, roles.HOD, roles.TEACHER, roles.PARENT, roles.STUDENT])
def test_register_reserve_a_l_admin(client, login_as, role):
    payload = {
        "email": "new@school.org",
        "password": "secret123",
        "role": "student",
        "first_name": "Awa",
        "last_name": "Ba",
    }
    with patch("app.routers.auth.auth_service.register_user") as mock:
        response = client.post("/api/auth/register", json=payload, headers=login_as(role))

    assert response.status_code == 403
    mock.assert_not_called()


# ============================================================
# Format des erreurs
# ============================================================

def test_route_inconnue_404(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_validation_400(client, login_as):
    """Corps invalide → 400 avec le champ en erreur, pas 422."""
    response = client.post(
        "/api/admin/assign-teacher-subject",
        json={"teacher_id": "not-a-uuid", "subject_id": str(uuid.uuid4()), "class_id": str(uuid.uuid4())},
        headers=login_as(roles.ADMIN),
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("teacher_id")


def test_validation_role_invalide_400(client, login_as):
    payload = {
        "email": "new@school.org",
        "password": "secret123",
        "role": "janitor",
        "first_name": "Awa",
        "last_name": "Ba",
    }
    response = client.post("/api/auth/register", json=payload, headers=login_as(roles.ADMIN))
    assert response.status_code == 400
    assert response.json()["error"] == "role: Invalid role"


def test_erreur_interne_500_sans_detail(mock_db, login_as):
    """Exception inattendue → 500 générique, le détail reste dans les logs."""
    from app.database import get_db

    app.dependency_overrides[get_db] = lambda: mock_db
    headers = login_as(roles.ADMIN)
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            with patch("app.routers.users.user_service.get_users") as mock:
                mock.side_effect = RuntimeError("connection reset by peer")
                response = c.get("/api/admin/users", headers=headers)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "An internal error occurred."}


# ============================================================
# Null explicite sur les colonnes NOT NULL (400, jamais 409 ni 500)
# ============================================================

@pytest.mark.parametrize("field", ["first_name", "last_name"])
def test_profil_nom_null_400(client, mock_db, login_as, field):
    response = client.put("/api/auth/profile", json={field: None}, headers=login_as(roles.TEACHER))

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: Field cannot be empty"
    mock_db.commit.assert_not_called()


def test_profil_modification_succes(client, mock_db, login_as):
    headers = login_as(roles.STUDENT)
    user = mock_db.get.return_value

    response = client.put("/api/auth/profile", json={"first_name": " Moussa ", "phone": "770000000"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["first_name"] == "Moussa"
    assert user.phone == "770000000"
    mock_db.commit.assert_called_once()


@pytest.mark.parametrize("field", ["last_name", "email", "role", "is_active"])
def test_admin_modification_null_400(client, mock_db, login_as, field):
    response = client.put(f"/api/admin/users/{uuid.uuid4()}", json={field: None}, headers=login_as(roles.ADMIN))

    assert response.status_code == 400
    assert response.json()["error"] == f"{field}: Field cannot be null"
    mock_db.commit.assert_not_called()


def test_admin_desactivation_de_soi_par_modification_400(client, mock_db, login_as):
    admin_id = uuid.uuid4()
    headers = login_as(roles.ADMIN, id=admin_id)

    response = client.put(f"/api/admin/users/{admin_id}", json={"is_active": False}, headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "Cannot deactivate your own account"
    assert mock_db.get.return_value.is_active is True
    mock_db.commit.assert_not_called()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
