"""
Students API: academic student records. Listing is scope-filtered; faculty manage the students assigned to them.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from faculty_portal.database import commit_or_conflict, get_db
from faculty_portal.errors import NotFound, ValidationError
from faculty_portal.models.student import Student
from faculty_portal.models.user import ADMIN_ROLES, ROLE_FACULTY, ROLE_STUDENT, User
from faculty_portal.schemas.common import MessageResponse
from faculty_portal.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from faculty_portal.services import access
from faculty_portal.api.deps import get_current_user, require_admin, require_roles

router = APIRouter(prefix="/api/students", tags=["students"])
logger = logging.getLogger(__name__)


def _get_student(db: Session, student_id: uuid.UUID) -> Student:
    student = db.get(Student, student_id)
    if not student:
        raise NotFound("Student not found")
    return student


def _check_references(db: Session, assigned_faculty_id: uuid.UUID | None, user_id: uuid.UUID | None) -> None:
    """assignedFacultyId must name a faculty user, userId a student user. Reports every bad field."""
    errors = []
    if assigned_faculty_id is not None:
        faculty = db.get(User, assigned_faculty_id)
        if not faculty or faculty.role != ROLE_FACULTY:
            errors.append({"field": "assignedFacultyId", "msg": "Assigned faculty must be a user with role faculty"})
    if user_id is not None:
        account = db.get(User, user_id)
        if not account or account.role != ROLE_STUDENT:
            errors.append({"field": "userId", "msg": "Linked account must be a user with role student"})
    if errors:
        raise ValidationError(errors)


@router.get("", response_model=list[StudentResponse])
def list_students(
    semester: int | None = None,
    department: str | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Admins see all, faculty their assigned students, a student their own record."""
    q = access.scope_students(db.query(Student), current_user)
    if semester is not None:
        q = q.filter(Student.semester == semester)
    if department:
        q = q.filter(Student.department == department)
    return q.order_by(Student.roll_number).all()


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    data: StudentCreate,
    current_user: User = Depends(require_roles(ROLE_FACULTY, *ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    """Faculty always become the assigned faculty; admins must name one."""
    if current_user.is_admin:
        if data.assigned_faculty_id is None:
            raise ValidationError.single("assignedFacultyId", "Assigned faculty is required")
        assigned_faculty_id = data.assigned_faculty_id
    else:
        assigned_faculty_id = current_user.id
    _check_references(db, assigned_faculty_id, data.user_id)
    student = Student(
        roll_number=data.roll_number,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        department=data.department,
        semester=data.semester,
        academic_year=data.academic_year,
        assigned_faculty_id=assigned_faculty_id,
        user_id=data.user_id,
    )
    db.add(student)
    commit_or_conflict(db)
    db.refresh(student)
    logger.info("Student created: %s by %s", student.roll_number, current_user.username)
    return student


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    student = _get_student(db, student_id)
    access.ensure(access.can_view_student(current_user, student))
    return student


@router.put("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: uuid.UUID,
    data: StudentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Assigned faculty or admin. Only an admin may move a student to another faculty."""
    student = _get_student(db, student_id)
    access.ensure(access.can_manage_student(current_user, student))
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    new_faculty = fields.get("assigned_faculty_id")
    if new_faculty is not None and new_faculty != student.assigned_faculty_id:
        access.ensure(current_user.is_admin, "Only an admin can reassign a student to another faculty")
    _check_references(db, new_faculty, fields.get("user_id"))
    for name, value in fields.items():
        setattr(student, name, value)
    commit_or_conflict(db)
    db.refresh(student)
    return student


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    student = _get_student(db, student_id)
    db.delete(student)
    commit_or_conflict(db)
    return MessageResponse(message="Student deleted successfully")
