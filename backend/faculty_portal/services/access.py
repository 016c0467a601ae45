"""
Scope checks: which records a caller may see or change, on top of route-level role gating.

admin / superadmin: everything.
Student record: its assigned faculty and the linked student login.
Report: the creator, the student's assigned faculty and the linked student login (read);
creator, assigned faculty (write).

Every non-admin branch also checks the caller's current role, so an account whose role
changed loses the scope it had under the old one.
"""
from sqlalchemy import false, or_
from sqlalchemy.orm import Query

from faculty_portal.errors import Forbidden
from faculty_portal.models.course import Course
from faculty_portal.models.report import Report
from faculty_portal.models.student import Student
from faculty_portal.models.user import ROLE_FACULTY, ROLE_STUDENT, User


def ensure(allowed: bool, message: str = "Not authorized") -> None:
    if not allowed:
        raise Forbidden(message)


def is_assigned_faculty(user: User, student: Student) -> bool:
    return user.role == ROLE_FACULTY and student.assigned_faculty_id == user.id


def is_linked_student(user: User, student: Student) -> bool:
    return user.role == ROLE_STUDENT and student.user_id == user.id


def is_report_creator(user: User, report: Report) -> bool:
    return user.role == ROLE_FACULTY and report.created_by_id == user.id


def can_view_student(user: User, student: Student) -> bool:
    return user.is_admin or is_assigned_faculty(user, student) or is_linked_student(user, student)


def can_manage_student(user: User, student: Student) -> bool:
    return user.is_admin or is_assigned_faculty(user, student)


def can_create_report_for(user: User, student: Student) -> bool:
    return user.is_admin or is_assigned_faculty(user, student)


def can_view_report(user: User, report: Report) -> bool:
    if user.is_admin or is_report_creator(user, report):
        return True
    return can_view_student(user, report.student)


def can_modify_report(user: User, report: Report) -> bool:
    if user.is_admin or is_report_creator(user, report):
        return True
    return is_assigned_faculty(user, report.student)


def can_manage_course(user: User, course: Course) -> bool:
    return user.is_admin or (user.role == ROLE_FACULTY and course.instructor_id == user.id)


def scope_students(q: Query, user: User) -> Query:
    if user.is_admin:
        return q
    if user.role == ROLE_FACULTY:
        return q.filter(Student.assigned_faculty_id == user.id)
    if user.role == ROLE_STUDENT:
        return q.filter(Student.user_id == user.id)
    return q.filter(false())


def scope_reports(q: Query, user: User) -> Query:
    """q must select Report; joins Student for non-admins."""
    if user.is_admin:
        return q
    if user.role == ROLE_FACULTY:
        return q.join(Student, Report.student_id == Student.id).filter(
            or_(Report.created_by_id == user.id, Student.assigned_faculty_id == user.id)
        )
    if user.role == ROLE_STUDENT:
        return q.join(Student, Report.student_id == Student.id).filter(Student.user_id == user.id)
    return q.filter(false())
