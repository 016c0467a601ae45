"""
Error taxonomy for the API layer.

Handlers and services raise these instead of HTTPException so every failure
maps to one status code and one JSON body shape:

    {"message": "...", ...details}

The handlers that render them are registered in faculty_portal.main.
"""
from typing import Any


class AppError(Exception):
    """Base for all errors that become an HTTP response."""

    status_code = 500
    default_message = "Server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, **self.details}


class ValidationError(AppError):
    """400 with one entry per violated field."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[dict[str, str]], message: str | None = None):
        self.errors = errors
        super().__init__(message, details={"errors": errors})

    @classmethod
    def single(cls, field: str, msg: str) -> "ValidationError":
        return cls([{"field": field, "msg": msg}], message=msg)

    @classmethod
    def from_pydantic(cls, errors: list[dict[str, Any]]) -> "ValidationError":
        """Build from pydantic / FastAPI `.errors()`; one entry per invalid field."""
        out = []
        for err in errors:
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")]
            out.append({"field": ".".join(loc) or "body", "msg": err.get("msg", "Invalid value")})
        return cls(out)


def conflict_from_integrity_error(exc: Exception) -> "Conflict":
    """Translate a store constraint violation (sqlalchemy IntegrityError) into Conflict."""
    msg = str(getattr(exc, "orig", exc)).lower()
    if "foreign key" in msg:
        return Conflict("Record is still referenced by other records")
    if "username" in msg:
        return Conflict("Username already exists")
    if "roll_number" in msg:
        return Conflict("Roll number already exists")
    if "email" in msg:
        return Conflict("Email already exists")
    if "uq_submission" in msg or "assignment_submissions" in msg:
        return Conflict("Already submitted")
    return Conflict()


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Resource already exists"


class UnsupportedMediaType(AppError):
    """Bad upload type or size. Reported as 400 like the other input errors."""

    status_code = 400
    default_message = "Invalid file type. Only PDF and DOC files are allowed."


class Internal(AppError):
    status_code = 500
    default_message = "Server error"


# Token layer. Not HTTP errors by themselves: api.deps maps them to Unauthenticated.

class TokenError(Exception):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


class ConfigurationError(RuntimeError):
    """Raised when a required setting (e.g. JWT_SECRET) is missing."""
