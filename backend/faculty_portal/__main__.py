"""
python -m faculty_portal: check the database, then serve on HOST:PORT.
"""
import logging
import sys

import uvicorn

from faculty_portal.config import settings
from faculty_portal.database import check_connection


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if not check_connection():
        logging.getLogger("faculty_portal").critical("Database unreachable at startup; exiting.")
        sys.exit(1)
    uvicorn.run("faculty_portal.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
