"""
Assignments API: instructors create and grade, enrolled students submit once (late after the due date).
"""
import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from faculty_portal.database import commit_or_conflict, get_db
from faculty_portal.errors import Conflict, NotFound, ValidationError
from faculty_portal.models.assignment import Assignment, AssignmentSubmission
from faculty_portal.models.user import ROLE_FACULTY, ROLE_STUDENT, User
from faculty_portal.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    GradeRequest,
    SubmissionCreate,
)
from faculty_portal.schemas.common import MessageResponse
from faculty_portal.services import access
from faculty_portal.api.courses import get_course_or_404
from faculty_portal.api.deps import get_current_user, require_roles

router = APIRouter(prefix="/api/assignments", tags=["assignments"])
logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    """SQLite hands back naive datetimes; they were stored as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _get_assignment(db: Session, assignment_id: uuid.UUID) -> Assignment:
    assignment = db.get(Assignment, assignment_id)
    if not assignment:
        raise NotFound("Assignment not found")
    return assignment


def _for_viewer(assignment: Assignment, user: User) -> AssignmentResponse:
    """Students only see their own submission."""
    out = AssignmentResponse.model_validate(assignment)
    if user.role == ROLE_STUDENT:
        out.submissions = [s for s in out.submissions if s.student.id == user.id]
    return out


@router.get("/course/{course_id}", response_model=list[AssignmentResponse])
def list_course_assignments(
    course_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_course_or_404(db, course_id)
    assignments = (
        db.query(Assignment)
        .filter(Assignment.course_id == course_id)
        .order_by(Assignment.due_date)
        .all()
    )
    return [_for_viewer(a, current_user) for a in assignments]


@router.get("/my-assignments", response_model=list[AssignmentResponse])
def my_assignments(
    current_user: User = Depends(require_roles(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    """Assignments the calling student has submitted to."""
    assignments = (
        db.query(Assignment)
        .join(AssignmentSubmission, AssignmentSubmission.assignment_id == Assignment.id)
        .filter(AssignmentSubmission.student_id == current_user.id)
        .order_by(Assignment.due_date)
        .all()
    )
    return [_for_viewer(a, current_user) for a in assignments]


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: AssignmentCreate,
    current_user: User = Depends(require_roles(ROLE_FACULTY)),
    db: Session = Depends(get_db),
):
    """Faculty create assignments for courses they teach."""
    course = get_course_or_404(db, data.course_id)
    access.ensure(course.instructor_id == current_user.id, "Only the course instructor can add assignments")
    assignment = Assignment(
        course_id=course.id,
        title=data.title,
        description=data.description,
        due_date=_as_utc(data.due_date),
        max_score=data.max_score,
        created_by_id=current_user.id,
    )
    db.add(assignment)
    commit_or_conflict(db)
    db.refresh(assignment)
    return assignment


@router.post("/{assignment_id}/submit", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def submit_assignment(
    assignment_id: uuid.UUID,
    data: SubmissionCreate,
    current_user: User = Depends(require_roles(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    """One submission per student; marked late after the due date."""
    assignment = _get_assignment(db, assignment_id)
    access.ensure(assignment.course.is_enrolled(current_user.id), "Not enrolled in this course")
    if any(s.student_id == current_user.id for s in assignment.submissions):
        raise Conflict("Already submitted")
    now = datetime.now(timezone.utc)
    submission_status = "late" if now > _as_utc(assignment.due_date) else "submitted"
    db.add(AssignmentSubmission(
        assignment_id=assignment.id,
        student_id=current_user.id,
        file_url=data.file_url,
        status=submission_status,
        submitted_at=now,
    ))
    commit_or_conflict(db)
    return MessageResponse(message="Assignment submitted successfully")


@router.post("/{assignment_id}/grade/{student_id}", response_model=MessageResponse)
def grade_submission(
    assignment_id: uuid.UUID,
    student_id: uuid.UUID,
    data: GradeRequest,
    current_user: User = Depends(require_roles(ROLE_FACULTY)),
    db: Session = Depends(get_db),
):
    assignment = _get_assignment(db, assignment_id)
    access.ensure(
        assignment.created_by_id == current_user.id or assignment.course.instructor_id == current_user.id
    )
    submission = next((s for s in assignment.submissions if s.student_id == student_id), None)
    if not submission:
        raise NotFound("Submission not found")
    if data.grade > assignment.max_score:
        raise ValidationError.single("grade", f"Grade cannot exceed {assignment.max_score:g}")
    submission.grade = data.grade
    submission.feedback = data.feedback
    submission.status = "graded"
    commit_or_conflict(db)
    logger.info("Graded assignment %s for student %s", assignment.id, student_id)
    return MessageResponse(message="Assignment graded successfully")
