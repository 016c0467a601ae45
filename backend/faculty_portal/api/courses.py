"""
Courses API: faculty/admin create courses, students enrol themselves, instructors post materials.
"""
import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from faculty_portal.database import commit_or_conflict, get_db
from faculty_portal.errors import Conflict, NotFound
from faculty_portal.models.course import Course, CourseMaterial, course_students
from faculty_portal.models.user import ADMIN_ROLES, ROLE_FACULTY, ROLE_STUDENT, User
from faculty_portal.schemas.common import MessageResponse
from faculty_portal.schemas.course import (
    CourseCreate,
    CourseResponse,
    CourseStatus,
    CourseUpdate,
    MaterialCreate,
    MaterialResponse,
)
from faculty_portal.services import access
from faculty_portal.api.deps import get_current_user, require_admin, require_roles

router = APIRouter(prefix="/api/courses", tags=["courses"])
logger = logging.getLogger(__name__)


def get_course_or_404(db: Session, course_id: uuid.UUID) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise NotFound("Course not found")
    return course


@router.get("", response_model=list[CourseResponse])
def list_courses(
    course_status: CourseStatus | None = Query(None, alias="status"),
    instructor: uuid.UUID | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Optional status/instructor filters. Students only see courses they are enrolled in."""
    q = db.query(Course)
    if course_status:
        q = q.filter(Course.status == course_status)
    if instructor is not None:
        q = q.filter(Course.instructor_id == instructor)
    if current_user.role == ROLE_STUDENT:
        q = q.join(course_students, course_students.c.course_id == Course.id).filter(
            course_students.c.user_id == current_user.id
        )
    return q.order_by(Course.created_at.desc()).all()


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    data: CourseCreate,
    current_user: User = Depends(require_roles(ROLE_FACULTY, *ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    """The caller becomes the instructor."""
    course = Course(
        title=data.title,
        description=data.description,
        status=data.status,
        instructor_id=current_user.id,
    )
    db.add(course)
    commit_or_conflict(db)
    db.refresh(course)
    logger.info("Course created: %s by %s", course.id, current_user.username)
    return course


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(
    course_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Students only see courses they are enrolled in."""
    course = get_course_or_404(db, course_id)
    if current_user.role == ROLE_STUDENT:
        access.ensure(course.is_enrolled(current_user.id), "Not enrolled in this course")
    return course


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: uuid.UUID,
    data: CourseUpdate,
    current_user: User = Depends(require_roles(ROLE_FACULTY, *ADMIN_ROLES)),
    db: Session = Depends(get_db),
):
    """Instructor or admin."""
    course = get_course_or_404(db, course_id)
    access.ensure(access.can_manage_course(current_user, course))
    for name, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(course, name, value)
    commit_or_conflict(db)
    db.refresh(course)
    return course


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: uuid.UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_id)
    db.delete(course)
    commit_or_conflict(db)
    return MessageResponse(message="Course deleted successfully")


@router.post("/{course_id}/enroll", response_model=MessageResponse)
def enroll(
    course_id: uuid.UUID,
    current_user: User = Depends(require_roles(ROLE_STUDENT)),
    db: Session = Depends(get_db),
):
    course = get_course_or_404(db, course_id)
    if course.is_enrolled(current_user.id):
        raise Conflict("Already enrolled")
    course.students.append(current_user)
    commit_or_conflict(db)
    return MessageResponse(message="Enrolled successfully")


@router.post("/{course_id}/materials", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
def add_material(
    course_id: uuid.UUID,
    data: MaterialCreate,
    current_user: User = Depends(require_roles(ROLE_FACULTY)),
    db: Session = Depends(get_db),
):
    """Only the course's own instructor."""
    course = get_course_or_404(db, course_id)
    access.ensure(course.instructor_id == current_user.id)
    material = CourseMaterial(course_id=course.id, title=data.title, description=data.description, url=data.url)
    db.add(material)
    commit_or_conflict(db)
    db.refresh(material)
    return material
