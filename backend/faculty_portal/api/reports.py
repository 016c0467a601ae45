"""
Reports API: faculty write reports for their assigned students, optionally attaching one PDF/DOC/DOCX (max 10 MB).
Every read, comment and download re-runs the scope check in services.access.
"""
import logging
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from faculty_portal.database import commit_or_conflict, get_db
from faculty_portal.errors import NotFound, UnsupportedMediaType, ValidationError
from faculty_portal.models.report import REPORT_TRANSITIONS, Report, ReportComment
from faculty_portal.models.student import Student
from faculty_portal.models.user import ADMIN_ROLES, ROLE_FACULTY, User
from faculty_portal.schemas.common import MessageResponse, UserSummary
from faculty_portal.schemas.report import (
    CommentCreate,
    CommentResponse,
    ReportCreate,
    ReportFileResponse,
    ReportResponse,
    ReportStatus,
    ReportUpdate,
)
from faculty_portal.schemas.student import StudentSummary
from faculty_portal.services import access, uploads
from faculty_portal.api.deps import get_current_user, require_admin, require_roles

router = APIRouter(prefix="/api/reports", tags=["reports"])
logger = logging.getLogger(__name__)


def _report_to_response(r: Report) -> ReportResponse:
    report_file = None
    if r.has_file:
        report_file = ReportFileResponse(
            filename=r.file_filename,
            original_name=r.file_original_name,
            mimetype=r.file_mimetype,
            size=r.file_size,
        )
    return ReportResponse(
        id=r.id,
        student=StudentSummary.model_validate(r.student),
        title=r.title,
        description=r.description,
        semester=r.semester,
        academic_year=r.academic_year,
        report_file=report_file,
        status=r.status,
        submission_date=r.submission_date,
        created_by=UserSummary.model_validate(r.created_by),
        comments=[
            CommentResponse(
                id=c.id,
                user=UserSummary.model_validate(c.user) if c.user else None,
                text=c.text,
                created_at=c.created_at,
            )
            for c in r.comments
        ],
        updated_at=r.updated_at,
    )


def _get_report(db: Session, report_id: uuid.UUID) -> Report:
    report = db.get(Report, report_id)
    if not report:
        raise NotFound("Report not found")
    return report


@router.get("", response_model=list[ReportResponse])
def list_reports(
    student: uuid.UUID | None = None,
    semester: int | None = None,
    report_status: ReportStatus | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reports the caller may see, newest first."""
    q = access.scope_reports(db.query(Report), current_user)
    if student is not None:
        q = q.filter(Report.student_id == student)
    if semester is not None:
        q = q.filter(Report.semester == semester)
    if report_status:
        q = q.filter(Report.status == report_status)
    return [_report_to_response(r) for r in q.order_by(Report.submission_date.desc()).all()]


@router.get("/faculty", response_model=list[ReportResponse])
def list_faculty_reports(
    current_user: User = Depends(require_roles(ROLE_FACULTY)),
    db: Session = Depends(get_db),
):
    """Reports for the students assigned to the calling faculty member."""
    reports = (
        db.query(Report)
        .join(Student, Report.student_id == Student.id)
        .filter(Student.assigned_faculty_id == current_user.id)
        .order_by(Report.submission_date.desc())
        .all()
    )
    return [_report_to_response(r) for r in reports]


@router.get("/download/{report_id}")
def download_report_file(
    report_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Stream the stored file under its original name, after the read scope check."""
    report = _get_report(db, report_id)
    access.ensure(access.can_view_report(current_user, report))
    if not report.has_file or not Path(report.file_path).is_file():
        raise NotFound("Report file not found")
    return FileResponse(
        report.file_path,
        media_type=report.file_mimetype or "application/octet-stream",
        filename=report.file_original_name or report.file_filename,
    )


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    student: str | None = Form(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    semester: str | None = Form(None),
    academic_year: str | None = Form(None, alias="academicYear"),
    report_status: str | None = Form(None, alias="status"),
    report_file: list[UploadFile] | None = File(None, alias="reportFile"),
    current_user: User = Depends(require_roles(ROLE_FACULTY, *ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    """Multipart create. The creator is always the caller; the file field is `reportFile`."""
    raw = {
        "student": student,
        "title": title,
        "description": description,
        "semester": semester,
        "academicYear": academic_year,
        "status": report_status,
    }
    try:
        data = ReportCreate.model_validate({k: v for k, v in raw.items() if v is not None})
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e.errors()) from e

    files = [f for f in (report_file or []) if f.filename]
    if len(files) > 1:
        raise UnsupportedMediaType("Only one file can be attached to a report")

    student_doc = db.get(Student, data.student)
    if not student_doc:
        raise NotFound("Student not found")
    access.ensure(access.can_create_report_for(current_user, student_doc))

    stored = None
    if files:
        stored = uploads.save_report_file(files[0].filename, files[0].content_type, files[0].file)
    report = Report(
        student_id=student_doc.id,
        title=data.title,
        description=data.description,
        semester=data.semester,
        academic_year=data.academic_year,
        status=data.status,
        created_by_id=current_user.id,
    )
    if stored:
        report.file_filename = stored.filename
        report.file_original_name = stored.original_name
        report.file_path = stored.path
        report.file_mimetype = stored.mimetype
        report.file_size = stored.size
    db.add(report)
    try:
        commit_or_conflict(db)
    except Exception:
        if stored:
            uploads.remove_file(stored.path)
        raise
    db.refresh(report)
    logger.info("Report created: %s for student %s by %s", report.id, student_doc.roll_number, current_user.username)
    return _report_to_response(report)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(
    report_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    report = _get_report(db, report_id)
    access.ensure(access.can_view_report(current_user, report))
    return _report_to_response(report)


@router.put("/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: uuid.UUID,
    data: ReportUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Creator, assigned faculty or admin. Status moves draft -> submitted -> reviewed (-> submitted to reopen)."""
    report = _get_report(db, report_id)
    access.ensure(access.can_modify_report(current_user, report))
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    new_status = fields.pop("status", None)
    if new_status and new_status != report.status:
        if new_status not in REPORT_TRANSITIONS[report.status]:
            raise ValidationError.single("status", f"Cannot change status from {report.status} to {new_status}")
        report.status = new_status
    for name, value in fields.items():
        setattr(report, name, value)
    commit_or_conflict(db)
    db.refresh(report)
    return _report_to_response(report)


@router.post("/{report_id}/comments", response_model=ReportResponse)
def add_comment(
    report_id: uuid.UUID,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Anyone who can read the report can comment on it."""
    report = _get_report(db, report_id)
    access.ensure(access.can_view_report(current_user, report))
    report.comments.append(ReportComment(user_id=current_user.id, text=data.text))
    commit_or_conflict(db)
    db.refresh(report)
    return _report_to_response(report)


@router.delete("/{report_id}", response_model=MessageResponse)
def delete_report(
    report_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    report = _get_report(db, report_id)
    file_path = report.file_path
    db.delete(report)
    commit_or_conflict(db)
    uploads.remove_file(file_path)
    return MessageResponse(message="Report deleted successfully")
