"""
Auth routes: login (JWT), GET /api/auth/me, PUT /api/auth/student-info.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faculty_portal.database import get_db
from faculty_portal.errors import ValidationError
from faculty_portal.models.user import ROLE_STUDENT, User
from faculty_portal.schemas.auth import LoginRequest, LoginResponse
from faculty_portal.schemas.user import StudentInfoUpdate, UserMutationResponse, UserResponse
from faculty_portal.services import users as user_store
from faculty_portal.services.tokens import issue_token
from faculty_portal.api.deps import get_current_user, require_roles

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Login with username/password; returns a 24h token and the user (no password)."""
    user = user_store.authenticate(db, data.username, data.password)
    if not user:
        logger.info("Login failed for username=%s", data.username)
        raise ValidationError.single("credentials", "Invalid credentials")
    token = issue_token(user)
    logger.info("Login successful: %s (%s)", user.username, user.role)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Return the caller's user record."""
    return current_user


@router.put("/student-info", response_model=UserMutationResponse)
def update_student_info(
    data: StudentInfoUpdate,
    current_user: User = Depends(require_roles(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    """Replace the caller's studentInfo blob."""
    user = user_store.update_profile(db, current_user, {}, info_value=data.student_info)
    return UserMutationResponse(
        message="Student information updated successfully",
        user=UserResponse.model_validate(user),
    )
