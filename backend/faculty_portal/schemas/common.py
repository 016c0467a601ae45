"""
Shared schema base: camelCase on the wire, snake_case in Python, readable from ORM objects.
"""
import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from faculty_portal.services.auth import MAX_PASSWORD_BYTES, password_fits


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


class UserSummary(ApiModel):
    """Embedded user reference (report creator, comment author, course instructor...)."""
    id: uuid.UUID
    username: str
    email: str
    first_name: str
    last_name: str


def check_password_bytes(v: str | None) -> str | None:
    """Shared field check: bcrypt reads at most 72 bytes, so longer passwords are refused."""
    if v is not None and not password_fits(v):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return v
