"""
SQLAlchemy models. Import here so Alembic and the app can use them.
"""
from faculty_portal.models.user import User
from faculty_portal.models.student import Student
from faculty_portal.models.report import Report, ReportComment
from faculty_portal.models.course import Course, CourseMaterial, course_students
from faculty_portal.models.assignment import Assignment, AssignmentSubmission

__all__ = [
    "User",
    "Student",
    "Report",
    "ReportComment",
    "Course",
    "CourseMaterial",
    "course_students",
    "Assignment",
    "AssignmentSubmission",
]
