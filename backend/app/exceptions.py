"""
Erreurs métier de l'API.

Chaque erreur porte son code HTTP ; le handler installé dans app.main la
convertit en réponse {"success": false, "error": <message>}.
"""

from typing import Any, Dict, Iterable, Optional


class AppError(Exception):
    status_code = 500
    default_message = "An internal error occurred."

    def __init__(self, message: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.extra = extra or {}
        super().__init__(self.message)


class MissingCredential(AppError):
    """Aucun jeton Bearer dans l'en-tête Authorization."""
    status_code = 401
    default_message = "Access token required"


class InvalidCredential(AppError):
    """Jeton mal formé, signature invalide ou expiré."""
    status_code = 403
    default_message = "Invalid or expired token"


class UnknownIdentity(AppError):
    """Jeton valide mais l'utilisateur n'existe plus."""
    status_code = 401
    default_message = "Invalid token"


class AccountDisabled(AppError):
    status_code = 403
    default_message = "Account is not active. Please contact administrator."


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied. Insufficient permissions."

    @classmethod
    def for_role(cls, required: Iterable[str], current: str) -> "Forbidden":
        """Refus du contrôle de rôle, avec les rôles attendus et le rôle actuel."""
        return cls(extra={"required": sorted(required), "current": current})


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Resource already exists"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class LoginFailed(AppError):
    status_code = 401
    default_message = "Invalid email or password"
