"""
Assignment and submission schemas.
"""
import uuid
from datetime import datetime

from pydantic import Field

from faculty_portal.schemas.common import ApiModel, UserSummary


class AssignmentCreate(ApiModel):
    course_id: uuid.UUID
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    due_date: datetime
    max_score: float = Field(default=100.0, gt=0)


class SubmissionCreate(ApiModel):
    file_url: str | None = Field(default=None, max_length=1024)


class GradeRequest(ApiModel):
    grade: float = Field(ge=0)
    feedback: str | None = None


class SubmissionResponse(ApiModel):
    id: uuid.UUID
    student: UserSummary
    file_url: str | None = None
    status: str
    grade: float | None = None
    feedback: str | None = None
    submitted_at: datetime | None = None


class AssignmentResponse(ApiModel):
    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: str | None = None
    due_date: datetime
    max_score: float
    created_by: UserSummary
    submissions: list[SubmissionResponse] = []
    created_at: datetime | None = None
