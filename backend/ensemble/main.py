"""FastAPI application entry point."""
import logging
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ensemble.config import settings, validate_runtime_config
from ensemble.database import Base, engine
from ensemble.logging_config import setup_logging

# Import routers
from ensemble.routers import admin, attendance, auth, clothing, events, profile_requests, roles, users

# Import all models so Base.metadata knows about them
from ensemble.models.user import User                  # noqa: F401
from ensemble.models.role import Role                  # noqa: F401
from ensemble.models.event import Event                # noqa: F401
from ensemble.models.attendance import Attendance, AttendanceHistory  # noqa: F401
from ensemble.models.profile_change_request import ProfileChangeRequest  # noqa: F401
from ensemble.models.clothing_item import ClothingItem  # noqa: F401

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ensemble Attendance",
    description="Attendance and membership management for an ensemble — events, presence, roles and profile approvals",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(roles.router, prefix="/api/roles", tags=["Roles"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(clothing.router, prefix="/api/clothing", tags=["Clothing"])
app.include_router(profile_requests.router, prefix="/api/profile/requests", tags=["ProfileRequests"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Invalid input is a 400 across the API."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log the failure server-side; clients only see a bare 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.on_event("startup")
def on_startup():
    """Configure logging, check secrets, and create tables in SQLite dev mode."""
    setup_logging()
    validate_runtime_config(settings)
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
