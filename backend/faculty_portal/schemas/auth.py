"""
Auth request/response schemas.
"""
from pydantic import Field, field_validator

from faculty_portal.schemas.common import ApiModel, check_password_bytes
from faculty_portal.schemas.user import UserResponse


class LoginRequest(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    password_bytes = field_validator("password")(check_password_bytes)


class LoginResponse(ApiModel):
    token: str
    user: UserResponse
