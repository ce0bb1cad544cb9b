"""
Résolution de la session : en-tête Authorization → utilisateur actif.

L'utilisateur est relu en BDD à chaque requête : un changement de rôle ou une
désactivation prend effet immédiatement, sans attendre l'expiration du jeton.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.exceptions import AccountDisabled, MissingCredential, UnknownIdentity
from app.models.user import User
from app.services.token_service import TokenCodec

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Extrait le jeton de 'Bearer <token>'. Lève MissingCredential sinon."""
    if not authorization:
        raise MissingCredential()

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise MissingCredential()
    return token.strip()


def resolve_session(db: Session, codec: TokenCodec, authorization: Optional[str]) -> User:
    """
    Retourne l'utilisateur courant, fraîchement chargé.

    Étapes :
    1. Extraire le jeton (MissingCredential)
    2. Vérifier signature et expiration (InvalidCredential)
    3. Relire l'utilisateur par son ID (UnknownIdentity)
    4. Refuser les comptes désactivés (AccountDisabled)
    """
    token = extract_bearer_token(authorization)
    payload = codec.verify(token)

    user = db.get(User, payload.subject_id)
    if user is None:
        logger.warning("Jeton valide pour un utilisateur inexistant : %s", payload.subject_id)
        raise UnknownIdentity()

    if not user.is_active:
        logger.warning("Accès refusé, compte désactivé : %s", user.id)
        raise AccountDisabled()

    return user
