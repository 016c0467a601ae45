"""
Shared fixtures: a throwaway SQLite file and upload dir, a TestClient, and helpers to create users and tokens.
Environment is set before faculty_portal is imported so Settings picks it up.
"""
import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="faculty_portal_tests_"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from faculty_portal.database import Base, SessionLocal, engine, init_db
from faculty_portal.main import app
from faculty_portal.models.student import Student
from faculty_portal.schemas.user import UserCreate
from faculty_portal.services import users as user_store
from faculty_portal.services.tokens import issue_token

PASSWORD = "secret123"

init_db()


@pytest.fixture(autouse=True)
def _clean_tables():
    """Every test starts from empty tables."""
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """make_user(role, username=None, password=PASSWORD) -> User"""
    counter = {"n": 0}

    def _make(role: str, username: str | None = None, password: str = PASSWORD):
        counter["n"] += 1
        name = username or f"{role}{counter['n']}"
        return user_store.create_user(db, UserCreate(
            username=name,
            email=f"{name}@example.com",
            password=password,
            first_name=role.title(),
            last_name=f"User{counter['n']}",
            role=role,
        ))

    return _make


@pytest.fixture
def make_student(db):
    """make_student(faculty, roll_number=..., user=None) -> Student"""

    def _make(faculty, roll_number: str = "CS001", user=None, semester: int = 3):
        student = Student(
            roll_number=roll_number,
            first_name="Asha",
            last_name="Rao",
            email=f"{roll_number.lower()}@students.example.com",
            department="CSE",
            semester=semester,
            academic_year="2024-25",
            assigned_faculty_id=faculty.id,
            user_id=user.id if user else None,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def headers():
    return auth_headers
