"""
Configuration de la connexion à la base de données PostgreSQL.
Le pool de connexions est géré par SQLAlchemy.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings
from app.exceptions import Conflict

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : fournit une session BDD et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Commit ; une violation de contrainte d'unicité devient un Conflict.
    La contrainte BDD reste l'autorité quand deux requêtes passent la pré-vérification.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Contrainte d'unicité violée : %s", message)
        raise Conflict(message)
