"""
Student record schemas. Semester is 1-8.
"""
import uuid
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from faculty_portal.schemas.common import ApiModel


class StudentCreate(ApiModel):
    roll_number: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    department: str = Field(min_length=1, max_length=100)
    semester: int = Field(ge=1, le=8)
    academic_year: str = Field(min_length=1, max_length=20)
    # Required when an admin creates the record; faculty are always assigned to themselves.
    assigned_faculty_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class StudentUpdate(ApiModel):
    roll_number: str | None = Field(default=None, min_length=1, max_length=50)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    department: str | None = Field(default=None, min_length=1, max_length=100)
    semester: int | None = Field(default=None, ge=1, le=8)
    academic_year: str | None = Field(default=None, min_length=1, max_length=20)
    assigned_faculty_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class StudentResponse(ApiModel):
    id: uuid.UUID
    roll_number: str
    first_name: str
    last_name: str
    email: str
    department: str
    semester: int
    assigned_faculty_id: uuid.UUID
    academic_year: str
    user_id: uuid.UUID | None = None
    created_at: datetime | None = None


class StudentSummary(ApiModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    roll_number: str
