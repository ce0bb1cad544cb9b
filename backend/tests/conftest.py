"""
Configuration partagée pour tous les tests.
Override la dépendance get_db pour éviter toute connexion réelle à PostgreSQL.
"""

import uuid
from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from app.database import get_db
from app.main import app
from app.services.token_service import get_token_codec


def make_user(role="admin", is_active=True, **kwargs):
    """Utilisateur factice portant tous les champs exposés par UserResponse."""
    return SimpleNamespace(
        id=kwargs.get("id", uuid.uuid4()),
        email=kwargs.get("email", f"{role}@school.org"),
        role=role,
        first_name=kwargs.get("first_name", "Amina"),
        last_name=kwargs.get("last_name", "Diallo"),
        phone=kwargs.get("phone"),
        profile_image=None,
        is_active=is_active,
        last_login=None,
        created_at=datetime.now(),
        password_hash=kwargs.get("password_hash", ""),
    )


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Client HTTP de test avec la BDD mockée."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(mock_db):
    """
    Connecte un utilisateur du rôle donné : la session le retrouve via db.get.
    Retourne les en-têtes HTTP à envoyer.
    """
    def _login(role, is_active=True, **kwargs):
        user = make_user(role, is_active=is_active, **kwargs)
        mock_db.get.return_value = user
        token = get_token_codec().issue(user)
        return {"Authorization": f"Bearer {token}"}

    return _login
