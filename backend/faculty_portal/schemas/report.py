"""
Report request/response schemas. Create arrives as multipart form data (see api.reports).
"""
import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from faculty_portal.schemas.common import ApiModel, UserSummary
from faculty_portal.schemas.student import StudentSummary

ReportStatus = Literal["draft", "submitted", "reviewed"]
# a report only reaches "reviewed" through an update
InitialReportStatus = Literal["draft", "submitted"]


class ReportCreate(ApiModel):
    student: uuid.UUID
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    semester: int = Field(ge=1, le=8)
    academic_year: str = Field(min_length=1, max_length=20)
    status: InitialReportStatus = "submitted"


class ReportUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    semester: int | None = Field(default=None, ge=1, le=8)
    academic_year: str | None = Field(default=None, min_length=1, max_length=20)
    status: ReportStatus | None = None


class CommentCreate(ApiModel):
    text: str = Field(min_length=1, max_length=5000)


class ReportFileResponse(ApiModel):
    filename: str
    original_name: str | None = None
    mimetype: str | None = None
    size: int | None = None


class CommentResponse(ApiModel):
    id: uuid.UUID
    user: UserSummary | None = None
    text: str
    created_at: datetime | None = None


class ReportResponse(ApiModel):
    id: uuid.UUID
    student: StudentSummary
    title: str
    description: str
    semester: int
    academic_year: str
    report_file: ReportFileResponse | None = None
    status: str
    submission_date: datetime | None = None
    created_by: UserSummary
    comments: list[CommentResponse] = []
    updated_at: datetime | None = None
