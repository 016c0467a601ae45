"""
Report file storage: extension allow-list, size ceiling, generated names.
"""
import io
from pathlib import Path

import pytest

from faculty_portal.config import settings
from faculty_portal.errors import UnsupportedMediaType
from faculty_portal.services import uploads


@pytest.mark.parametrize("name", ["virus.exe", "notes.txt", "noext", "", None])
def test_disallowed_extensions_rejected(name):
    with pytest.raises(UnsupportedMediaType):
        uploads.check_extension(name)


@pytest.mark.parametrize("name,ext", [("r.pdf", ".pdf"), ("R.PDF", ".pdf"), ("a.doc", ".doc"), ("b.docx", ".docx")])
def test_allowed_extensions(name, ext):
    assert uploads.check_extension(name) == ext


def test_exe_never_written():
    before = set(uploads.reports_dir().iterdir())
    with pytest.raises(UnsupportedMediaType):
        uploads.save_report_file("setup.exe", "application/octet-stream", io.BytesIO(b"MZ"))
    assert set(uploads.reports_dir().iterdir()) == before


def test_pdf_saved_under_generated_name():
    stored = uploads.save_report_file("../../etc/report.pdf", "application/pdf", io.BytesIO(b"%PDF-1.4 data"))
    path = Path(stored.path)
    assert path.parent == uploads.reports_dir()
    assert path.read_bytes() == b"%PDF-1.4 data"
    assert stored.original_name == "report.pdf"
    assert stored.filename != "report.pdf" and stored.filename.endswith(".pdf")
    assert stored.size == len(b"%PDF-1.4 data")
    uploads.remove_file(stored.path)
    assert not path.exists()


def test_size_limit():
    assert uploads.read_limited(io.BytesIO(b"x" * 10), max_bytes=10) == b"x" * 10
    with pytest.raises(UnsupportedMediaType):
        uploads.read_limited(io.BytesIO(b"x" * 11), max_bytes=10)


def test_generated_names_do_not_collide():
    names = {uploads.generate_stored_name(".pdf") for _ in range(200)}
    assert len(names) == 200


def test_reports_dir_outside_public_mount():
    assert uploads.public_dir() not in uploads.reports_dir().parents
    assert uploads.reports_dir() != uploads.public_dir()


def test_default_ceiling_is_ten_mib():
    limit = settings.max_upload_bytes
    assert limit == 10 * 1024 * 1024
    assert len(uploads.read_limited(io.BytesIO(b"x" * limit))) == limit
    with pytest.raises(UnsupportedMediaType):
        uploads.read_limited(io.BytesIO(b"x" * (limit + 1)))
