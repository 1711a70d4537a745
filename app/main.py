"""
RoadFix - FastAPI Application Entry Point

Tracks citizen-reported road defects from report to repair.

ROLES:
- user: reports defects
- manager: assigns repair teams, removes reports
- worker: marks scheduled repairs as resolved
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.firebase import initialize_firestore
from app.core.errors import DomainError, ValidationError
from app.core.settings import settings
from app.routes import auth, health, reports, teams
from app.services.team_store import TeamStore
from app.utils.security import init_signing_key

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Road defect reports, repair team assignment and repair tracking",
    debug=settings.DEBUG
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Render service-layer errors as {"error": message}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are a 400, not FastAPI's default 422."""
    errors = exc.errors()
    logger.info(f"Validation error on {request.method} {request.url.path}: {errors}")

    if any(e.get("type") == "missing" for e in errors):
        error = ValidationError()
    elif errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "body"
        error = ValidationError(f"Invalid field '{field}': {first.get('msg')}")
    else:
        error = ValidationError("Invalid request")

    return await domain_exception_handler(request, error)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize process-wide state on application startup:
    signing key (required), Firestore connection, seed teams.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    secret = settings.JWT_SECRET_KEY.get_secret_value() if settings.JWT_SECRET_KEY else None
    init_signing_key(secret, settings.JWT_ALGORITHM, settings.JWT_EXPIRE_MINUTES)

    try:
        db = initialize_firestore()
    except RuntimeError as e:
        logger.warning(f"Firestore initialization failed: {e}")
        logger.warning("The app will start but database operations may fail.")
        return

    if settings.seed_teams:
        TeamStore(db).ensure(settings.seed_teams)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(reports.router)
app.include_router(teams.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
    }
