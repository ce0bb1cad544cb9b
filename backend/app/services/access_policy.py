"""
Contrôle d'accès par rôle.

Chaque groupe de routes déclare une liste fixe de rôles autorisés ; une seule
fonction `authorize` évalue cette politique pour toutes les routes.
Aucune vérification de propriété ici (elle relève des services métier).
"""

from typing import Iterable, Optional

from app import roles
from app.exceptions import Forbidden, Unauthenticated

ROUTE_POLICIES = {
    "account": roles.ALL_ROLES,
    "admin": frozenset({roles.ADMIN}),
    "headmaster": frozenset({roles.HEADMASTER}),
    "hod": frozenset({roles.HOD}),
    "teacher": frozenset({roles.TEACHER}),
    "parent": frozenset({roles.PARENT}),
    "student": frozenset({roles.STUDENT}),
}


def authorize(identity: Optional[object], allowed_roles: Iterable[str]):
    """
    Autorise l'identité si son rôle figure dans `allowed_roles` et la retourne.
    Lève Unauthenticated sans identité, Forbidden si le rôle ne correspond pas.
    """
    if identity is None:
        raise Unauthenticated()

    allowed = frozenset(allowed_roles)
    if identity.role not in allowed:
        raise Forbidden.for_role(allowed, identity.role)
    return identity
