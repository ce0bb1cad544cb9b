"""
Émission et vérification des jetons d'accès (JWT signé HS256).

Le jeton porte {userId, email, role} et expire 7 jours après émission.
Pas de rafraîchissement : après expiration, l'utilisateur doit se reconnecter.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError

from app.config import settings
from app.exceptions import InvalidCredential


@dataclass(frozen=True)
class TokenPayload:
    """Contenu vérifié d'un jeton. Le rôle n'est qu'indicatif : la session relit la BDD."""
    subject_id: uuid.UUID
    email: str
    role: str


@dataclass(frozen=True)
class TokenCodec:
    secret: str
    algorithm: str = "HS256"
    lifetime: timedelta = timedelta(days=7)

    def issue(self, user, now: Optional[datetime] = None) -> str:
        """Signe un jeton pour l'utilisateur, valable `lifetime` à partir de `now`."""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "userId": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Vérifie la signature et l'expiration.
        Lève InvalidCredential pour tout jeton mal formé, falsifié ou expiré.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_iat": True},
            )
        except JOSEError:
            raise InvalidCredential()

        try:
            return TokenPayload(
                subject_id=uuid.UUID(str(claims["userId"])),
                email=claims["email"],
                role=claims["role"],
            )
        except (KeyError, ValueError):
            raise InvalidCredential()


@lru_cache
def get_token_codec() -> TokenCodec:
    """Dépendance FastAPI : codec construit une fois à partir de la configuration."""
    return TokenCodec(
        secret=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        lifetime=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    )
