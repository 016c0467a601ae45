"""
Report: written by faculty (or admin) on behalf of a Student, optional uploaded file, threaded comments.
Access is decided by the student's assigned faculty and the report's creator (see services.access).
"""
import uuid
from datetime import datetime
from sqlalchemy import String, Text, Integer, BigInteger, DateTime, CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from faculty_portal.database import Base
from faculty_portal.models.types import UuidType, utcnow

REPORT_STATUSES = ("draft", "submitted", "reviewed")

# current status -> statuses it may move to
REPORT_TRANSITIONS = {
    "draft": frozenset({"submitted"}),
    "submitted": frozenset({"reviewed"}),
    "reviewed": frozenset({"submitted"}),
}


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("students.id", ondelete="RESTRICT"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    # Uploaded file descriptor; all None when the report has no file
    file_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_original_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_mimetype: Mapped[str | None] = mapped_column(String(255), nullable=True)
    file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="submitted", index=True)
    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'submitted', 'reviewed')", name="reports_status_check"),
        CheckConstraint("semester BETWEEN 1 AND 8", name="reports_semester_check"),
        Index("ix_reports_student_semester", "student_id", "semester"),
    )

    student = relationship("Student")
    created_by = relationship("User", foreign_keys=[created_by_id])
    comments = relationship(
        "ReportComment",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportComment.created_at",
    )

    @property
    def has_file(self) -> bool:
        return bool(self.file_path)


class ReportComment(Base):
    __tablename__ = "report_comments"

    id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), primary_key=True, default=uuid.uuid4
    )
    report_id: Mapped[uuid.UUID] = mapped_column(
        UuidType(), ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UuidType(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    report = relationship("Report", back_populates="comments")
    user = relationship("User")
