"""
Application configuration from environment variables.
Loads .env from the backend directory so JWT_SECRET and DATABASE_URL are found regardless of cwd.
"""
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env next to backend/ (parent of faculty_portal/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=False)
else:
    # Fallback: backend/.env relative to cwd (e.g. when running from repo root)
    _cwd_env = Path(os.getcwd()) / "backend" / ".env"
    if _cwd_env.exists():
        load_dotenv(_cwd_env, override=False)


class Settings(BaseSettings):
    """Load and validate config from env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database: sqlite for local runs and tests, postgresql for production
    database_url: str = "sqlite:///./faculty_portal.db"

    # Environment: set ENV=production in production; hides error details in 500 responses.
    env: str = ""
    debug: bool = False

    # JWT. Empty secret is refused at startup and by the token service.
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    # HTTP server (python -m faculty_portal)
    host: str = "0.0.0.0"
    port: int = 5000

    # Uploads: report files go to upload_dir/reports, /uploads serves upload_dir/public only
    upload_dir: Path = Path("./uploads")
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_report_extensions: str = ".pdf,.doc,.docx"

    # Account created on an empty users table. Must be changed on first login.
    bootstrap_username: str = "superadmin"
    bootstrap_password: str = "super123"
    bootstrap_email: str = "superadmin@example.com"

    # CORS: comma-separated origins
    cors_origins: str = "http://localhost:3000"

    @property
    def is_production(self) -> bool:
        return (self.env or "").strip().lower() == "production"

    @property
    def report_extensions(self) -> frozenset[str]:
        return frozenset(
            e.strip().lower() for e in self.allowed_report_extensions.split(",") if e.strip()
        )

    def resolved_upload_dir(self) -> Path:
        """Absolute upload root; relative paths are taken from the backend directory."""
        base = self.upload_dir if self.upload_dir.is_absolute() else _BACKEND_DIR / self.upload_dir
        return base.resolve()


settings = Settings()
