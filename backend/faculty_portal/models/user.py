"""
User model: login identity (username + bcrypt hash), one role, optional role-specific profile blobs.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, JSON, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from faculty_portal.database import Base
from faculty_portal.models.types import UuidType

ROLE_STUDENT = "student"
ROLE_TRAINER = "trainer"
ROLE_FACULTY = "faculty"
ROLE_ADMIN = "admin"
ROLE_SUPERADMIN = "superadmin"

ROLES = (ROLE_STUDENT, ROLE_TRAINER, ROLE_FACULTY, ROLE_ADMIN, ROLE_SUPERADMIN)
ADMIN_ROLES = frozenset({ROLE_ADMIN, ROLE_SUPERADMIN})

# role -> column holding that role's profile blob
INFO_FIELD_BY_ROLE = {
    ROLE_STUDENT: "student_info",
    ROLE_TRAINER: "trainer_info",
    ROLE_ADMIN: "admin_info",
    ROLE_SUPERADMIN: "admin_info",
}


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    student_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    trainer_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    admin_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'trainer', 'faculty', 'admin', 'superadmin')",
            name="users_role_check",
        ),
    )

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role})>"
