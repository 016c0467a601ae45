"""
Report file storage: extension allow-list, size ceiling, collision-resistant names.
Files land in <upload_dir>/reports, which is not under the /uploads static mount.
"""
import logging
import mimetypes
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from faculty_portal.config import settings
from faculty_portal.errors import UnsupportedMediaType

logger = logging.getLogger(__name__)

REPORTS_SUBDIR = "reports"
PUBLIC_SUBDIR = "public"


@dataclass(frozen=True)
class StoredFile:
    filename: str  # generated name on disk
    original_name: str
    path: str
    mimetype: str
    size: int


def reports_dir() -> Path:
    path = settings.resolved_upload_dir() / REPORTS_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def public_dir() -> Path:
    path = settings.resolved_upload_dir() / PUBLIC_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def check_extension(filename: str | None) -> str:
    """Return the lower-cased extension if allowed, else raise UnsupportedMediaType."""
    ext = Path(filename or "").suffix.lower()
    if not ext or ext not in settings.report_extensions:
        raise UnsupportedMediaType(
            "Invalid file type. Only PDF and DOC files are allowed.",
            details={"allowed": sorted(settings.report_extensions)},
        )
    return ext


def read_limited(stream: BinaryIO, max_bytes: int | None = None) -> bytes:
    """Read the whole stream, refusing anything larger than max_bytes."""
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    contents = stream.read(limit + 1)
    if len(contents) > limit:
        raise UnsupportedMediaType(
            f"File too large. Maximum size is {limit // (1024 * 1024)} MB.",
            details={"maxBytes": limit},
        )
    return contents


def generate_stored_name(ext: str) -> str:
    """<epoch ms>-<random 9 digits><ext>; never derived from the client's filename."""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9):09d}{ext}"


def save_report_file(filename: str | None, content_type: str | None, stream: BinaryIO) -> StoredFile:
    """Validate then write one uploaded report file. Nothing is written if validation fails."""
    ext = check_extension(filename)
    contents = read_limited(stream)
    target = reports_dir() / generate_stored_name(ext)
    target.write_bytes(contents)
    mimetype = content_type or mimetypes.guess_type(filename or "")[0] or "application/octet-stream"
    logger.info("Stored report file %s (%s bytes)", target.name, len(contents))
    return StoredFile(
        filename=target.name,
        original_name=Path(filename or target.name).name,
        path=str(target),
        mimetype=mimetype,
        size=len(contents),
    )


def remove_file(path: str | None) -> None:
    if not path:
        return
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove stored file %s: %s", path, e)
