"""
Tests unitaires du contrôle d'accès par rôle.
"""

from types import SimpleNamespace

import pytest

from app import roles
from app.exceptions import Forbidden, Unauthenticated
from app.services.access_policy import ROUTE_POLICIES, authorize

GROUP_OWNER = {
    "admin": roles.ADMIN,
    "headmaster": roles.HEADMASTER,
    "hod": roles.HOD,
    "teacher": roles.TEACHER,
    "parent": roles.PARENT,
    "student": roles.STUDENT,
}


def test_authorize_sans_identite():
    with pytest.raises(Unauthenticated):
        authorize(None, {roles.ADMIN})


def test_authorize_retourne_l_identite():
    user = SimpleNamespace(role=roles.ADMIN)
    assert authorize(user, {roles.ADMIN}) is user


def test_authorize_refus_porte_required_et_current():
    with pytest.raises(Forbidden) as exc:
        authorize(SimpleNamespace(role=roles.STUDENT), {roles.TEACHER, roles.ADMIN})

    assert exc.value.status_code == 403
    assert exc.value.message == "Access denied. Insufficient permissions."
    assert exc.value.extra == {"required": ["admin", "teacher"], "current": "student"}


@pytest.mark.parametrize("role", sorted(roles.ALL_ROLES))
@pytest.mark.parametrize("group", sorted(GROUP_OWNER))
def test_groupes_de_routes_par_role(group, role):
    """Chaque groupe n'accepte que son rôle propriétaire."""
    user = SimpleNamespace(role=role)
    if role == GROUP_OWNER[group]:
        assert authorize(user, ROUTE_POLICIES[group]) is user
    else:
        with pytest.raises(Forbidden):
            authorize(user, ROUTE_POLICIES[group])


@pytest.mark.parametrize("role", sorted(roles.ALL_ROLES))
def test_groupe_account_ouvert_a_tous_les_roles(role):
    user = SimpleNamespace(role=role)
    assert authorize(user, ROUTE_POLICIES["account"]) is user


def test_role_inconnu_refuse_partout():
    user = SimpleNamespace(role="superuser")
    for allowed in ROUTE_POLICIES.values():
        with pytest.raises(Forbidden):
            authorize(user, allowed)
