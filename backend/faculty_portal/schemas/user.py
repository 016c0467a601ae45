"""
User schemas, including the role-specific profile blobs (studentInfo / trainerInfo / adminInfo).
Every blob field is optional; unknown keys are dropped.
"""
import uuid
import datetime as dt
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from faculty_portal.schemas.common import ApiModel, check_password_bytes

RoleName = Literal["student", "trainer", "faculty", "admin", "superadmin"]


class Address(ApiModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None


class Certification(ApiModel):
    name: str | None = None
    issuer: str | None = None
    date: dt.date | None = None
    expiry_date: dt.date | None = None
    credential_id: str | None = None


class Achievement(ApiModel):
    title: str | None = None
    description: str | None = None
    date: dt.date | None = None


class Education(ApiModel):
    degree: str | None = None
    institution: str | None = None
    year: int | None = None
    percentage: float | None = Field(default=None, ge=0, le=100)


class StudentInfo(ApiModel):
    phone_number: str | None = None
    gender: Literal["male", "female", "other"] | None = None
    date_of_birth: dt.date | None = None
    branch: str | None = None
    address: Address | None = None
    certifications: list[Certification] = []
    skills: list[str] = []
    achievements: list[Achievement] = []
    education: list[Education] = []


class Qualification(ApiModel):
    degree: str | None = None
    institution: str | None = None
    year: int | None = None


class TrainerCourse(ApiModel):
    name: str | None = None
    description: str | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class TrainerInfo(ApiModel):
    specialization: list[str] = []
    experience: int | None = Field(default=None, ge=0)
    phone_number: str | None = None
    qualifications: list[Qualification] = []
    courses: list[TrainerCourse] = []


class AdminInfo(ApiModel):
    department: str | None = None
    phone_number: str | None = None
    permissions: list[str] = []


class _ProfileFields(ApiModel):
    @field_validator("email", check_fields=False)
    @classmethod
    def lower_email(cls, v):
        return v.lower() if isinstance(v, str) else v

    password_bytes = field_validator("password", check_fields=False)(check_password_bytes)


class UserCreate(_ProfileFields):
    username: str = Field(min_length=3, max_length=150)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: RoleName
    student_info: StudentInfo | None = None
    trainer_info: TrainerInfo | None = None
    admin_info: AdminInfo | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters long")
        return v


class UserUpdate(_ProfileFields):
    """Admin partial update. Only fields present in the body are applied."""
    username: str | None = Field(default=None, min_length=3, max_length=150)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=72)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: RoleName | None = None
    student_info: StudentInfo | None = None
    trainer_info: TrainerInfo | None = None
    admin_info: AdminInfo | None = None


class ProfileUpdate(_ProfileFields):
    """Self-service update: names, email and the caller's own role blob. Never role or password."""
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    student_info: StudentInfo | None = None
    trainer_info: TrainerInfo | None = None
    admin_info: AdminInfo | None = None


class StudentInfoUpdate(ApiModel):
    student_info: StudentInfo


class UserResponse(ApiModel):
    """User as returned by the API. There is no password field to leak."""
    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str
    role: str
    student_info: StudentInfo | None = None
    trainer_info: TrainerInfo | None = None
    admin_info: AdminInfo | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class UserMutationResponse(ApiModel):
    message: str
    user: UserResponse
