"""
Point d'entrée principal de l'API du portail scolaire.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import app.models  # noqa: F401 (enregistre tous les modèles dans Base.metadata avant les routers)
from app.config import DEFAULT_SECRET_KEY, settings
from app.exceptions import AppError
from app.routers import (
    academics,
    auth,
    classes,
    headmaster,
    hod,
    parent,
    relationships,
    student,
    teacher,
    users,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : contrôle de la configuration au démarrage."""
    if settings.ENV == "production" and settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY par défaut utilisée en production : les jetons sont falsifiables")
    yield


app = FastAPI(
    title="School Portal API",
    description="API du système d'information scolaire (rôles, associations, départements)",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : origines locales par défaut, surchargeables via CORS_ORIGIN_REGEX.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(academics.router)
app.include_router(classes.router)
app.include_router(relationships.router)
app.include_router(hod.router)
app.include_router(headmaster.router)
app.include_router(teacher.router)
app.include_router(parent.router)
app.include_router(student.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Erreur métier : code HTTP porté par l'exception, corps {success, error}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, **exc.extra},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps ou paramètres invalides : 400 avec le premier champ en erreur."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        msg = str(first.get("msg", "")).removeprefix("Value error, ")
        message = f"{field}: {msg}" if field else msg
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Erreurs HTTP du framework (404 de route, 405...) au même format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour garantir que la réponse 500
    passe bien par CORSMiddleware (qui injecte les headers CORS).
    Le détail n'est jamais renvoyé au client.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An internal error occurred."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "School Portal API", "version": "0.1.0"}
