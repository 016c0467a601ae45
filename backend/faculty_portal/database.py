"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (local runs and tests).
Sync usage; one session per request via get_db.
"""
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, declarative_base

from faculty_portal.config import settings
from faculty_portal.errors import conflict_from_integrity_error

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.database_url
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores FOREIGN KEY clauses unless asked; keep delete rules identical to PostgreSQL.
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db():
    """Create tables that do not exist yet. PostgreSQL deployments run `alembic upgrade head` instead."""
    # Import all models so they register with Base before create_all
    from faculty_portal.models import user, student, report, course, assignment  # noqa: F401
    Base.metadata.create_all(bind=engine)


def check_connection() -> bool:
    """Return True if the database answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_conflict(db) -> None:
    """Commit; a constraint violation rolls back and becomes Conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Write rejected by constraint: %s", getattr(e, "orig", e))
        raise conflict_from_integrity_error(e) from e
