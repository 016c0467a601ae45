"""
Credential store: create / authenticate / update / delete users, plus the bootstrap account.

Uniqueness of username and email is enforced by the database's unique indexes.
A violation surfaces as IntegrityError at commit and is translated into Conflict.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from faculty_portal.config import settings
from faculty_portal.database import commit_or_conflict
from faculty_portal.errors import Forbidden, NotFound, ValidationError
from faculty_portal.models.student import Student
from faculty_portal.models.user import (
    INFO_FIELD_BY_ROLE,
    ROLE_ADMIN,
    ROLE_FACULTY,
    ROLE_STUDENT,
    ROLE_SUPERADMIN,
    ROLE_TRAINER,
    User,
)
from faculty_portal.schemas.user import UserCreate, UserUpdate
from faculty_portal.services.auth import hash_password, verify_password

logger = logging.getLogger(__name__)

INFO_FIELDS = ("student_info", "trainer_info", "admin_info")

# Demo accounts written by scripts/seed_users.py
DEMO_USERS = [
    {"username": "superadmin", "password": "super123", "role": ROLE_SUPERADMIN, "first_name": "Super", "last_name": "Admin"},
    {"username": "admin", "password": "admin123", "role": ROLE_ADMIN, "first_name": "Admin", "last_name": "User"},
    {"username": "faculty", "password": "faculty123", "role": ROLE_FACULTY, "first_name": "Faculty", "last_name": "User"},
    {"username": "trainer", "password": "trainer123", "role": ROLE_TRAINER, "first_name": "Trainer", "last_name": "User"},
    {"username": "student", "password": "student123", "role": ROLE_STUDENT, "first_name": "Student", "last_name": "User"},
]


def _dump_info(value) -> dict | None:
    if value is None:
        return None
    return value.model_dump(mode="json", by_alias=True, exclude_none=True)


def _check_can_grant(role: str | None, actor: User | None) -> None:
    if role == ROLE_SUPERADMIN and actor is not None and actor.role != ROLE_SUPERADMIN:
        raise Forbidden("Only a superadmin can assign the superadmin role")


def _check_can_manage(target: User, actor: User | None) -> None:
    if target.role == ROLE_SUPERADMIN and actor is not None and actor.role != ROLE_SUPERADMIN:
        raise Forbidden("Only a superadmin can change or delete a superadmin account")


def _check_role_change(db: Session, user: User, new_role: str | None) -> None:
    """A faculty member keeps the faculty role while any student is still assigned to them."""
    if user.role != ROLE_FACULTY or new_role in (None, ROLE_FACULTY):
        return
    if db.query(Student.id).filter(Student.assigned_faculty_id == user.id).first() is not None:
        raise ValidationError.single("role", "Reassign this faculty member's students before changing their role")


def _keep_role_blob(user: User) -> None:
    keep = INFO_FIELD_BY_ROLE.get(user.role)
    for name in INFO_FIELDS:
        if name != keep:
            setattr(user, name, None)


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def list_users(db: Session, role: str | None = None) -> list[User]:
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.created_at, User.username).all()


def create_user(db: Session, data: UserCreate, actor: User | None = None) -> User:
    """Insert a user with a bcrypt hash. Only the profile blob matching the role is kept."""
    _check_can_grant(data.role, actor)
    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
    )
    info_field = INFO_FIELD_BY_ROLE.get(data.role)
    if info_field:
        setattr(user, info_field, _dump_info(getattr(data, info_field)))
    db.add(user)
    commit_or_conflict(db)
    db.refresh(user)
    logger.info("User created: %s (%s)", user.username, user.role)
    return user


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Return the user if username/password match, else None."""
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def verify_user_password(db: Session, username: str, candidate: str) -> bool:
    """Compare candidate with the stored hash. Raises NotFound for an unknown username."""
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFound("User not found")
    return verify_password(candidate, user.password_hash)


def update_user(db: Session, user_id: uuid.UUID, data: UserUpdate, actor: User | None = None) -> User:
    """Apply the fields present in data; a new password is re-hashed."""
    user = get_user(db, user_id)
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    _check_can_manage(user, actor)
    _check_can_grant(fields.get("role"), actor)
    _check_role_change(db, user, fields.get("role"))
    for name in fields:
        if name == "password":
            user.password_hash = hash_password(data.password)
        elif name in INFO_FIELDS:
            setattr(user, name, _dump_info(getattr(data, name)))
        else:
            setattr(user, name, fields[name])
    _keep_role_blob(user)
    commit_or_conflict(db)
    db.refresh(user)
    logger.info("User updated: %s fields=%s", user.username, sorted(k for k in fields if k != "password"))
    return user


def update_profile(db: Session, user: User, fields: dict, info_value=None) -> User:
    """Self-service update of already-filtered fields plus the caller's own role blob."""
    for name, value in fields.items():
        setattr(user, name, value)
    info_field = INFO_FIELD_BY_ROLE.get(user.role)
    if info_field and info_value is not None:
        setattr(user, info_field, _dump_info(info_value))
    commit_or_conflict(db)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: uuid.UUID, actor: User | None = None) -> None:
    """Hard delete. Conflict if other rows still reference the user."""
    user = get_user(db, user_id)
    _check_can_manage(user, actor)
    username = user.username
    db.delete(user)
    commit_or_conflict(db)
    logger.info("User deleted: %s", username)


def ensure_bootstrap_account(db: Session) -> User | None:
    """
    Create the default superadmin when the users table is empty. Idempotent.
    The default credential is well known and must be changed after first login.
    """
    if db.query(User.id).first() is not None:
        return None
    user = User(
        username=settings.bootstrap_username,
        email=settings.bootstrap_email.lower(),
        password_hash=hash_password(settings.bootstrap_password),
        first_name="Super",
        last_name="Admin",
        role=ROLE_SUPERADMIN,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # another worker created it first
        db.rollback()
        return None
    logger.warning(
        "Bootstrap superadmin '%s' created with the default password. Change it now.",
        user.username,
    )
    return user


def seed_demo_users(db: Session) -> list[str]:
    """Create the demo accounts that are missing; return the usernames created."""
    created = []
    for demo in DEMO_USERS:
        if db.query(User.id).filter(User.username == demo["username"]).first() is not None:
            continue
        db.add(User(
            username=demo["username"],
            email=f"{demo['username']}@example.com",
            password_hash=hash_password(demo["password"]),
            first_name=demo["first_name"],
            last_name=demo["last_name"],
            role=demo["role"],
        ))
        created.append(demo["username"])
    commit_or_conflict(db)
    return created
