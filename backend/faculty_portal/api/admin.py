"""
User management for admin and superadmin: list, create, read, partial update, hard delete.
"""
import logging
import uuid
from typing import Literal

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from faculty_portal.database import get_db
from faculty_portal.models.user import User
from faculty_portal.schemas.common import MessageResponse
from faculty_portal.schemas.user import UserCreate, UserMutationResponse, UserResponse, UserUpdate
from faculty_portal.services import users as user_store
from faculty_portal.api.deps import require_admin

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=list[UserResponse])
def list_users(
    role: Literal["student", "trainer", "faculty", "admin", "superadmin"] | None = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All users, optionally filtered by role."""
    return user_store.list_users(db, role=role)


@router.post("/users", response_model=UserMutationResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = user_store.create_user(db, data, actor=current_user)
    return UserMutationResponse(message="User created successfully", user=UserResponse.model_validate(user))


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(
    user_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return user_store.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserMutationResponse)
def update_user(
    user_id: uuid.UUID,
    data: UserUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Partial update; any field including role and password."""
    user = user_store.update_user(db, user_id, data, actor=current_user)
    return UserMutationResponse(message="User updated successfully", user=UserResponse.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user_store.delete_user(db, user_id, actor=current_user)
    return MessageResponse(message="User deleted successfully")
