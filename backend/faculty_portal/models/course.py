"""
Course: taught by one instructor, students enrol themselves, instructor posts materials.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, CheckConstraint, ForeignKey, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from faculty_portal.database import Base
from faculty_portal.models.types import UuidType, utcnow

COURSE_STATUSES = ("draft", "active", "archived")

course_students = Table(
    "course_students",
    Base.metadata,
    Column("course_id", UuidType(), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", UuidType(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructor_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active", index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'active', 'archived')", name="courses_status_check"),
    )

    instructor = relationship("User", foreign_keys=[instructor_id])
    students = relationship("User", secondary=course_students)
    materials = relationship(
        "CourseMaterial",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseMaterial.created_at",
    )
    assignments = relationship("Assignment", back_populates="course", cascade="all, delete-orphan")

    def is_enrolled(self, user_id: uuid.UUID) -> bool:
        return any(s.id == user_id for s in self.students)


class CourseMaterial(Base):
    __tablename__ = "course_materials"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    course = relationship("Course", back_populates="materials")
