"""
Profile API: the caller reads and edits their own record.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faculty_portal.database import get_db
from faculty_portal.models.user import INFO_FIELD_BY_ROLE, User
from faculty_portal.schemas.user import ProfileUpdate, UserMutationResponse, UserResponse
from faculty_portal.services import users as user_store
from faculty_portal.api.deps import get_current_user

router = APIRouter(prefix="/api/profile", tags=["profile"])

# Plain columns a user may change on their own account
PROFILE_FIELDS = ("first_name", "last_name", "email")


@router.get("", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/update", response_model=UserMutationResponse)
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update names/email and the blob for the caller's own role; other blobs are ignored."""
    provided = data.model_dump(exclude_unset=True, exclude_none=True)
    fields = {k: provided[k] for k in PROFILE_FIELDS if k in provided}
    info_field = INFO_FIELD_BY_ROLE.get(current_user.role)
    info_value = getattr(data, info_field) if info_field else None
    user = user_store.update_profile(db, current_user, fields, info_value=info_value)
    return UserMutationResponse(message="Profile updated successfully", user=UserResponse.model_validate(user))
