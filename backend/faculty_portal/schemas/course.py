"""
Course and course material schemas.
"""
import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from faculty_portal.schemas.common import ApiModel, UserSummary

CourseStatus = Literal["draft", "active", "archived"]


class CourseCreate(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: CourseStatus = "active"


class CourseUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: CourseStatus | None = None


class MaterialCreate(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    url: str | None = Field(default=None, max_length=1024)


class MaterialResponse(ApiModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    url: str | None = None
    created_at: datetime | None = None


class CourseResponse(ApiModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    status: str
    instructor: UserSummary
    students: list[UserSummary] = []
    materials: list[MaterialResponse] = []
    created_at: datetime | None = None
