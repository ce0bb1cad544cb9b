"""
Dépendances FastAPI d'authentification et d'autorisation.

Usage dans un router :
    router = APIRouter(prefix="/api/hod", dependencies=[Depends(require_route_group("hod"))])
    def handler(current_user: User = Depends(get_current_user)): ...

FastAPI met en cache get_current_user par requête : l'utilisateur n'est relu qu'une fois.
"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.services.access_policy import ROUTE_POLICIES, authorize
from app.services.session_service import resolve_session
from app.services.token_service import TokenCodec, get_token_codec


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> User:
    """Utilisateur actif correspondant au jeton Bearer de la requête."""
    return resolve_session(db, codec, authorization)


def require_roles(*allowed_roles: str):
    """Dépendance qui n'accepte que les rôles donnés."""
    allowed = frozenset(allowed_roles)

    def checker(current_user: User = Depends(get_current_user)) -> User:
        return authorize(current_user, allowed)

    return checker


def require_route_group(group: str):
    """Dépendance appliquant la politique déclarée pour un groupe de routes."""
    return require_roles(*ROUTE_POLICIES[group])
