"""
Credential store: hashing, uniqueness via DB constraints, password checks, bootstrap and demo seeding.
"""
import uuid

import pydantic
import pytest

from faculty_portal.errors import Conflict, Forbidden, NotFound, ValidationError
from faculty_portal.models.user import User
from faculty_portal.schemas.user import UserCreate, UserUpdate
from faculty_portal.services import users as user_store
from faculty_portal.services.auth import hash_password, verify_password


def _create(username="alice", email="alice@example.com", role="faculty", password="secret123"):
    return UserCreate(
        username=username, email=email, password=password, first_name="Alice", last_name="Smith", role=role,
    )


def test_hash_is_salted_and_verifies():
    h1, h2 = hash_password("secret123"), hash_password("secret123")
    assert h1 != h2
    assert verify_password("secret123", h1)
    assert not verify_password("wrong", h1)


def test_verify_against_malformed_hash_is_false():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_create_stores_hash_not_plaintext(db):
    user = user_store.create_user(db, _create())
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)


def test_duplicate_username_conflicts(db):
    user_store.create_user(db, _create())
    with pytest.raises(Conflict) as exc:
        user_store.create_user(db, _create(email="other@example.com"))
    assert "Username" in exc.value.message


def test_duplicate_email_conflicts_case_insensitive(db):
    user_store.create_user(db, _create())
    with pytest.raises(Conflict):
        user_store.create_user(db, _create(username="bob", email="ALICE@example.com"))


def test_only_blob_for_role_is_kept(db):
    data = UserCreate(
        username="stud", email="stud@example.com", password="secret123", first_name="S", last_name="T",
        role="student", student_info={"branch": "CSE"}, trainer_info={"experience": 3},
    )
    user = user_store.create_user(db, data)
    assert user.student_info["branch"] == "CSE"
    assert user.trainer_info is None


def test_verify_user_password(db):
    user_store.create_user(db, _create())
    assert user_store.verify_user_password(db, "alice", "secret123") is True
    assert user_store.verify_user_password(db, "alice", "nope") is False
    with pytest.raises(NotFound):
        user_store.verify_user_password(db, "ghost", "secret123")


def test_authenticate(db):
    user_store.create_user(db, _create())
    assert user_store.authenticate(db, "alice", "secret123").username == "alice"
    assert user_store.authenticate(db, "alice", "wrong") is None
    assert user_store.authenticate(db, "ghost", "secret123") is None


def test_update_rehashes_password(db):
    user = user_store.create_user(db, _create())
    user_store.update_user(db, user.id, UserUpdate(password="newpass123"))
    assert user_store.authenticate(db, "alice", "newpass123") is not None
    assert user_store.authenticate(db, "alice", "secret123") is None


def test_admin_cannot_grant_superadmin(db):
    admin = user_store.create_user(db, _create(username="admin1", email="a1@example.com", role="admin"))
    with pytest.raises(Forbidden):
        user_store.create_user(db, _create(role="superadmin"), actor=admin)
    target = user_store.create_user(db, _create())
    with pytest.raises(Forbidden):
        user_store.update_user(db, target.id, UserUpdate(role="superadmin"), actor=admin)


def test_delete_unknown_user_is_not_found(db):
    with pytest.raises(NotFound):
        user_store.delete_user(db, uuid.uuid4())


def test_bootstrap_is_idempotent(db):
    first = user_store.ensure_bootstrap_account(db)
    assert first is not None and first.role == "superadmin"
    assert user_store.ensure_bootstrap_account(db) is None
    assert db.query(User).count() == 1


def test_bootstrap_skipped_when_users_exist(db):
    user_store.create_user(db, _create())
    assert user_store.ensure_bootstrap_account(db) is None


def test_seed_demo_users_only_adds_missing(db):
    created = user_store.seed_demo_users(db)
    assert set(created) == {"superadmin", "admin", "faculty", "trainer", "student"}
    assert user_store.seed_demo_users(db) == []


def test_password_byte_boundary(db):
    user_store.create_user(db, _create(password="a" * 71 + "X"))
    assert user_store.authenticate(db, "alice", "a" * 71 + "X") is not None
    # same first 71 bytes must not verify
    assert user_store.authenticate(db, "alice", "a" * 71 + "Y") is None
    with pytest.raises(pydantic.ValidationError):
        _create(username="bob", email="bob@example.com", password="a" * 73)
    # 37 characters, 74 bytes
    with pytest.raises(pydantic.ValidationError):
        UserUpdate(password="é" * 37)
    with pytest.raises(ValueError):
        hash_password("a" * 73)
    assert verify_password("a" * 73, hash_password("a" * 72)) is False


def test_admin_cannot_change_or_delete_superadmin(db):
    admin = user_store.create_user(db, _create(username="admin1", email="a1@example.com", role="admin"))
    root = user_store.create_user(db, _create(username="root", email="root@example.com", role="superadmin"))
    with pytest.raises(Forbidden):
        user_store.update_user(db, root.id, UserUpdate(password="pwned123"), actor=admin)
    with pytest.raises(Forbidden):
        user_store.update_user(db, root.id, UserUpdate(role="faculty"), actor=admin)
    with pytest.raises(Forbidden):
        user_store.delete_user(db, root.id, actor=admin)
    assert user_store.authenticate(db, "root", "secret123") is not None

    other_root = user_store.create_user(db, _create(username="root2", email="root2@example.com", role="superadmin"))
    user_store.update_user(db, root.id, UserUpdate(first_name="Renamed"), actor=other_root)
    user_store.delete_user(db, root.id, actor=other_root)


def test_faculty_with_students_keeps_role(db, make_student):
    faculty = user_store.create_user(db, _create())
    make_student(faculty)
    with pytest.raises(ValidationError) as exc:
        user_store.update_user(db, faculty.id, UserUpdate(role="student"))
    assert exc.value.errors[0]["field"] == "role"
    db.refresh(faculty)
    assert faculty.role == "faculty"
    # unrelated updates still go through
    user_store.update_user(db, faculty.id, UserUpdate(first_name="Still"))


def test_role_change_keeps_only_matching_blob(db):
    user = user_store.create_user(db, UserCreate(
        username="stud", email="stud@example.com", password="secret123", first_name="S", last_name="T",
        role="student", student_info={"branch": "CSE"},
    ))
    updated = user_store.update_user(db, user.id, UserUpdate(role="trainer", trainer_info={"experience": 2}))
    assert updated.student_info is None
    assert updated.trainer_info["experience"] == 2

    updated = user_store.update_user(db, user.id, UserUpdate(student_info={"branch": "ECE"}))
    assert updated.student_info is None
