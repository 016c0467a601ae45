"""
FastAPI application entrypoint.
Run with: python -m faculty_portal   (or: uvicorn faculty_portal.main:app --reload --port 5000)

All routes live under /api:
  - Auth:        POST /api/auth/login, GET /api/auth/me, PUT /api/auth/student-info
  - Profile:     GET /api/profile, PUT /api/profile/update
  - Admin:       /api/admin/users (CRUD, admin/superadmin only)
  - Students:    /api/students
  - Reports:     /api/reports (multipart create, comments, download)
  - Courses:     /api/courses
  - Assignments: /api/assignments
  - Health:      GET /api/health

Static: /uploads serves <UPLOAD_DIR>/public. Report files are only reachable via /api/reports/download/{id}.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from faculty_portal import __version__
from faculty_portal.config import settings
from faculty_portal.database import SessionLocal, check_connection, init_db
from faculty_portal.errors import AppError, ConfigurationError, ValidationError, conflict_from_integrity_error
from faculty_portal.services import uploads
from faculty_portal.api.admin import router as admin_router
from faculty_portal.api.assignments import router as assignments_router
from faculty_portal.api.auth import router as auth_router
from faculty_portal.api.courses import router as courses_router
from faculty_portal.api.profile import router as profile_router
from faculty_portal.api.reports import router as reports_router
from faculty_portal.api.students import router as students_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Faculty Portal API",
    description="Faculty-facing API: users and roles, student records, semester reports, courses and assignments.",
    version=__version__,
)

_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins if _origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(admin_router)
app.include_router(students_router)
app.include_router(reports_router)
app.include_router(courses_router)
app.include_router(assignments_router)

app.mount("/uploads", StaticFiles(directory=uploads.public_dir()), name="uploads")


@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    """Same 400 body as ValidationError, one entry per invalid field."""
    err = ValidationError.from_pydantic(exc.errors())
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError):
    err = conflict_from_integrity_error(exc)
    logger.info("Constraint violation on %s %s: %s", request.method, request.url.path, err.message)
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"message": "Server error"}
    if settings.debug and not settings.is_production:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.on_event("startup")
def startup():
    """Refuse to start without JWT_SECRET, create tables, seed the bootstrap account on an empty store."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    _log = logging.getLogger("faculty_portal.main")
    if not (settings.jwt_secret or "").strip():
        _log.critical("JWT_SECRET must be set. Set JWT_SECRET in env or backend/.env.")
        raise ConfigurationError("JWT_SECRET must be set. Set JWT_SECRET in env or backend/.env.")
    init_db()
    db = SessionLocal()
    try:
        from faculty_portal.services.users import ensure_bootstrap_account
        ensure_bootstrap_account(db)
    finally:
        db.close()
    _log.info("Uploads: %s", settings.resolved_upload_dir())


@app.get("/api/health")
def health():
    """Liveness plus database status."""
    db_ok = check_connection()
    return {
        "status": "ok" if db_ok else "degraded",
        "message": "Faculty Portal API",
        "database": "connected" if db_ok else "disconnected",
    }
